"""
Structural converters

Passes that turn specific tag families into flat Markdown idioms:

- <Heading>          -> '#' heading one level below the current one
- <Example>          -> '#' Example heading, body dedented
- <Tabs>/<Tab>       -> one heading per tab, body dedented
- <Procedure>/<Step> -> '**Step N:** title' markers, body dedented
- <IoCodeBlock>      -> '**Input:**' / '**Output:**' labeled blocks

Heading-producing passes derive the current level from the literal
headings they see, so each pass depends on the headings earlier passes
emitted. A heading emitted by <Heading> conversion becomes the current
level: two adjacent <Heading> tags under '##' yield '###' then '####'.

Fenced content is never edited; it only receives the dedent of the scope
that encloses it.
"""

import re
from typing import List, Optional

from ..models.markup import LineKind
from .scanner import (
    LineScanner,
    heading_make,
    heading_parse,
    headingLevel_next,
    line_dedent,
    titleLines_join,
)
from .tags import (
    SECTION_TAGS,
    tag_attribute,
    tag_isClosing,
    tag_isOpening,
    tag_matchAny,
    tag_sameLineContent,
)

EXAMPLE_TITLE = "Example"
EXAMPLE_INDENT = 2
TABS_INDENT = 4        # 2 for <Tabs> + 2 for <Tab>
STEP_INDENT = 4        # 2 for <Procedure> + 2 for <Step>
IOBLOCK_INDENT = 4     # 2 for <IoCodeBlock> + 2 for <Input>/<Output>

INPUT_LABEL = "**Input:**"
OUTPUT_LABEL = "**Output:**"


def headings_convert(content: str, level: int = 1) -> str:
    """
    Convert <Heading> tags into Markdown headings.

    The inner text, possibly spread over several lines, becomes a heading
    at min(current level + 1, 6). The emitted heading then becomes the
    current level.

    Args:
        content: Document text
        level: Heading level in effect before the first literal heading

    Example:
        >>> headings_convert("<Heading>\\n  Subsection\\n</Heading>\\n\\nBody", level=2)
        '### Subsection\\n\\nBody'
    """
    output: List[str] = []
    current_level = level
    in_heading = False
    opener = ''
    heading_lines: List[str] = []

    for line in LineScanner(content):
        if line.verbatim:
            output.append(line.text)
            continue

        if in_heading:
            if tag_isClosing(line.stripped, 'Heading'):
                in_heading = False
                text = titleLines_join(heading_lines)
                if text:
                    current_level = headingLevel_next(current_level)
                    output.append(heading_make(current_level, text))
                continue
            heading_lines.append(line.text)
            continue

        parsed = heading_parse(line.stripped)
        if parsed:
            current_level = parsed[0]
            output.append(line.text)
            continue

        inline = tag_sameLineContent(line.stripped, 'Heading')
        if inline is not None:
            text = inline.strip()
            if text:
                current_level = headingLevel_next(current_level)
                output.append(heading_make(current_level, text))
            continue

        if tag_isOpening(line.stripped, 'Heading'):
            in_heading = True
            opener = line.text
            heading_lines = []
            continue

        output.append(line.text)

    if in_heading:
        # Unclosed <Heading>: give the text back rather than lose it
        output.append(opener)
        output.extend(heading_lines)

    return '\n'.join(output)


def examples_convert(content: str, level: int = 1) -> str:
    """
    Convert <Example> blocks into an 'Example' heading plus dedented body.

    The heading goes one level below the current one; the body loses
    2 leading spaces. Whitespace normalization later puts a blank line
    after the inserted heading.
    """
    output: List[str] = []
    current_level = level
    in_example = False

    for line in LineScanner(content):
        dedent = EXAMPLE_INDENT if in_example else 0

        if line.verbatim:
            output.append(line_dedent(line.text, dedent))
            continue

        parsed = heading_parse(line.stripped)
        if parsed:
            current_level = parsed[0]
            output.append(line_dedent(line.text, dedent))
            continue

        if tag_isOpening(line.stripped, 'Example'):
            in_example = True
            output.append(heading_make(headingLevel_next(current_level), EXAMPLE_TITLE))
            continue

        if tag_isClosing(line.stripped, 'Example'):
            in_example = False
            continue

        output.append(line_dedent(line.text, dedent))

    return '\n'.join(output)


def tabTitle_fromId(tabid: str) -> str:
    """
    Turn a machine-readable tab id into a title.

    Example:
        >>> tabTitle_fromId("search-analyzer-syntax")
        'Search Analyzer Syntax'
    """
    return ' '.join(word[:1].upper() + word[1:] for word in tabid.split('-'))


def tabs_convert(content: str, level: int = 1) -> str:
    """
    Convert <Tabs>/<Tab> groups into sequential subsections.

    The <Tabs> wrapper is dropped. Each <Tab> becomes a heading at
    min(current level + 1, 6) titled by its ``title`` attribute, or else
    by its title-cased ``tabid``. Tab bodies lose 4 leading spaces.
    """
    output: List[str] = []
    current_level = level
    in_tabs = False

    for line in LineScanner(content):
        dedent = TABS_INDENT if in_tabs else 0

        if line.verbatim:
            output.append(line_dedent(line.text, dedent))
            continue

        parsed = heading_parse(line.stripped)
        if parsed:
            current_level = parsed[0]
            output.append(line_dedent(line.text, dedent))
            continue

        if tag_isOpening(line.stripped, 'Tabs'):
            in_tabs = True
            continue

        if tag_isClosing(line.stripped, 'Tabs'):
            in_tabs = False
            continue

        if in_tabs and tag_isOpening(line.stripped, 'Tab'):
            title = tag_attribute(line.stripped, 'title')
            tabid = tag_attribute(line.stripped, 'tabid')
            if not title and tabid:
                title = tabTitle_fromId(tabid)
            if title:
                output.append(heading_make(headingLevel_next(current_level), title))
            continue

        if in_tabs and tag_isClosing(line.stripped, 'Tab'):
            continue

        output.append(line_dedent(line.text, dedent))

    return '\n'.join(output)


def ioblocks_convert(content: str) -> str:
    """
    Convert <IoCodeBlock> exchanges into labeled blocks.

    Inside an <IoCodeBlock>, <Input> becomes '**Input:**' and <Output>
    becomes a blank line followed by '**Output:**'. All enclosed content,
    fences included, loses 4 leading spaces; an exchange nested in a list
    keeps the list item's indent.
    """
    output: List[str] = []
    in_block = False

    for line in LineScanner(content):
        if line.verbatim:
            output.append(line_dedent(line.text, IOBLOCK_INDENT if in_block else 0))
            continue

        if tag_isOpening(line.stripped, 'IoCodeBlock'):
            in_block = True
            continue

        if tag_isClosing(line.stripped, 'IoCodeBlock'):
            in_block = False
            continue

        if in_block:
            if tag_isOpening(line.stripped, 'Input'):
                output.append(INPUT_LABEL)
                continue
            if tag_isOpening(line.stripped, 'Output'):
                output.append('')
                output.append(OUTPUT_LABEL)
                continue
            if tag_isClosing(line.stripped, 'Input') or tag_isClosing(line.stripped, 'Output'):
                continue
            output.append(line_dedent(line.text, IOBLOCK_INDENT))
            continue

        output.append(line.text)

    return '\n'.join(output)


def title_normalize(text: str) -> str:
    """
    Normalize a title for duplicate detection.

    Collapses whitespace, removes spaces before punctuation and strips
    trailing punctuation. Case is preserved.

    Example:
        >>> title_normalize("Define  the index .")
        'Define the index'
    """
    text = re.sub(r'\s+([.,;:!?])', r'\1', text)
    text = re.sub(r'([.,;:!?])\s+', r'\1 ', text)
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'[.,;:!?\s]+$', '', text)
    return text.strip()


class ProcedureConverter:
    """
    Converts <Procedure>/<Step> markup into numbered steps

    A step's title is every non-blank line between <Step> and the first
    nested <Section> (the body), a heading, a fence, or </Step>. The title
    is emitted as '**Step N:** title' plus a blank line. Step bodies lose
    4 leading spaces; the <Section> that ends a title is kept for the
    Section pass that runs next.

    Upstream generators sometimes repeat the step title as a heading right
    after it; a literal heading or <Heading> tag immediately following the
    title whose normalized text equals the title is dropped.

    Each <Procedure> numbers its steps from 1.
    """

    def __init__(self) -> None:
        self.output: List[str] = []
        self.in_procedure = False
        self.in_step = False
        self.step_number: Optional[int] = None
        self.collecting_title = False
        self.title_lines: List[str] = []
        self.last_title = ''
        self.dedupe_pending = False
        self.in_heading = False
        self.heading_lines: List[str] = []

    def convert(self, content: str) -> str:
        for line in LineScanner(content):
            if line.verbatim:
                self.verbatim_handle(line.text, line.kind is LineKind.FENCE)
            else:
                self.line_handle(line.text, line.stripped)

        if self.in_heading:
            self.output.append('<Heading>')
            self.output.extend(self.heading_lines)
        if self.in_step:
            self.title_emit()
        return '\n'.join(self.output)

    def verbatim_handle(self, text: str, is_fence: bool) -> None:
        if not (self.in_procedure and self.in_step):
            self.output.append(text)
            return
        if self.collecting_title and is_fence:
            self.title_emit()
        self.dedupe_pending = False
        self.output.append(line_dedent(text, STEP_INDENT))

    def line_handle(self, text: str, stripped: str) -> None:
        if tag_isOpening(stripped, 'Procedure'):
            self.in_procedure = True
            self.step_number = 0
            return

        if tag_isClosing(stripped, 'Procedure'):
            if self.in_step:
                self.title_emit()
            self.in_procedure = False
            self.in_step = False
            self.step_number = None
            return

        if not self.in_procedure:
            self.output.append(text)
            return

        if tag_isOpening(stripped, 'Step'):
            self.in_step = True
            self.step_number = (self.step_number or 0) + 1
            self.title_lines = []
            self.collecting_title = True
            self.dedupe_pending = False
            return

        if tag_isClosing(stripped, 'Step'):
            self.title_emit()
            self.in_step = False
            self.last_title = ''
            self.dedupe_pending = False
            return

        if not self.in_step:
            self.output.append(text)
            return

        self.stepLine_handle(text, stripped)

    def stepLine_handle(self, text: str, stripped: str) -> None:
        if self.in_heading:
            if tag_isClosing(stripped, 'Heading'):
                self.in_heading = False
                self.headingTag_flush()
            elif stripped:
                self.heading_lines.append(stripped)
            return

        if tag_isOpening(stripped, 'Heading'):
            if self.collecting_title:
                self.title_emit()
            self.in_heading = True
            self.heading_lines = []
            return

        if self.collecting_title:
            if tag_matchAny(stripped, SECTION_TAGS, tag_isOpening):
                self.title_emit()
                self.output.append(line_dedent(text, STEP_INDENT))
                return
            if not stripped:
                return
            if heading_parse(stripped):
                self.title_emit()
            else:
                self.title_lines.append(stripped)
                return

        if not stripped:
            self.output.append(line_dedent(text, STEP_INDENT))
            return

        parsed = heading_parse(stripped)
        if parsed and self.title_duplicates(parsed[1]):
            self.dedupe_pending = False
            return

        self.dedupe_pending = False
        self.output.append(line_dedent(text, STEP_INDENT))

    def headingTag_flush(self) -> None:
        heading_text = titleLines_join(self.heading_lines)
        lines = self.heading_lines
        self.heading_lines = []
        if self.title_duplicates(heading_text):
            self.dedupe_pending = False
            return
        self.dedupe_pending = False
        self.output.append('<Heading>')
        self.output.extend(lines)
        self.output.append('</Heading>')

    def title_duplicates(self, text: str) -> bool:
        if not self.dedupe_pending or not self.last_title:
            return False
        return title_normalize(text) == title_normalize(self.last_title)

    def title_emit(self) -> None:
        if self.collecting_title and self.title_lines:
            title = titleLines_join(self.title_lines)
            self.last_title = title
            self.dedupe_pending = True
            self.output.append(f'**Step {self.step_number}:** {title}')
            # Blank line after every title, including one closed by </Step>
            self.output.append('')
        self.title_lines = []
        self.collecting_title = False


def procedures_convert(content: str) -> str:
    """Convert <Procedure>/<Step> markup into '**Step N:**' markers"""
    return ProcedureConverter().convert(content)
