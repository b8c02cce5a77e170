"""
Line scanner and fence tracker

Every normalization pass walks its document line by line through a
LineScanner, which classifies each line as fenced code, frontmatter or
ordinary markup. The fence rule is shared by all passes: a line whose
trimmed text begins with the fence delimiter toggles fence state, unless a
frontmatter block is currently open.

Also holds the small line helpers the passes have in common (dedenting,
heading detection, title joining).

Example:
    >>> scanner = LineScanner("text\\n```\\n<Tag>\\n```")
    >>> [line.kind.value for line in scanner]
    ['text', 'fence', 'code', 'fence']
"""

import re
from typing import Iterator, List, Optional, Tuple

from ..models.markup import FrontmatterMode, LineKind, ScanState, ScannedLine

FENCE_DELIMITER = "```"
FRONTMATTER_DELIMITER = "---"
MAX_HEADING_LEVEL = 6

HEADING_PATTERN = re.compile(r'^(#{1,6})\s+(.+)$')
LEADING_SPACES_PATTERN = re.compile(r'^( *)')
TITLE_PUNCTUATION_PATTERN = re.compile(r'^[.,;:!?]')


class LineScanner:
    """
    State-tagged line iterator

    Iterating yields one ScannedLine per line of the document, in order. The
    scanner's ``state`` reflects the line most recently yielded, so a pass
    may also push/pop its own scopes on ``state.scope_stack``.
    """

    def __init__(self, content: str, frontmatter: FrontmatterMode = FrontmatterMode.IGNORE) -> None:
        """
        Args:
            content: Document text; split on '\\n'
            frontmatter: How '---' delimiter lines are treated
        """
        self.lines: List[str] = content.split('\n')
        self.frontmatter = frontmatter
        self.state = ScanState()

    def __iter__(self) -> Iterator[ScannedLine]:
        self.state = ScanState()
        for index, text in enumerate(self.lines):
            stripped = text.strip()
            kind = self.line_classify(stripped)
            if stripped:
                self.state.content_seen = True
            yield ScannedLine(index=index, text=text, stripped=stripped, kind=kind)

    def line_classify(self, stripped: str) -> LineKind:
        """Classify one trimmed line and advance fence/frontmatter state"""
        state = self.state

        if stripped.startswith(FENCE_DELIMITER) and not state.in_frontmatter:
            state.in_fence = not state.in_fence
            return LineKind.FENCE

        if state.in_fence:
            return LineKind.CODE

        if stripped == FRONTMATTER_DELIMITER and self.frontmatter_opens():
            if state.in_frontmatter:
                state.in_frontmatter = False
                state.frontmatter_closed = True
            else:
                state.in_frontmatter = True
            return LineKind.FRONTMATTER_DELIMITER

        if state.in_frontmatter:
            return LineKind.FRONTMATTER

        return LineKind.TEXT

    def frontmatter_opens(self) -> bool:
        """Whether a delimiter line at the cursor opens or closes frontmatter"""
        state = self.state
        if self.frontmatter is FrontmatterMode.IGNORE:
            return False
        if state.in_frontmatter or self.frontmatter is FrontmatterMode.ALL:
            return True
        # LEADING: only a block that starts the document counts
        return not state.frontmatter_closed and not state.content_seen


def leadingSpaces_count(line: str) -> int:
    """Number of leading space characters in a line"""
    match = LEADING_SPACES_PATTERN.match(line)
    return len(match.group(1)) if match else 0


def line_dedent(line: str, amount: int) -> str:
    """
    Remove up to ``amount`` leading spaces from a line.

    Clamped to the spaces actually present, so an under-indented line loses
    all of its leading spaces and never any content.

    Example:
        >>> line_dedent("      code", 4)
        '  code'
        >>> line_dedent("  text", 4)
        'text'
    """
    if amount <= 0:
        return line
    return line[min(amount, leadingSpaces_count(line)):]


def heading_parse(stripped: str) -> Optional[Tuple[int, str]]:
    """
    Parse a literal Markdown heading.

    Returns:
        (level, text) for lines like '## Title', None otherwise
    """
    match = HEADING_PATTERN.match(stripped)
    if not match:
        return None
    return len(match.group(1)), match.group(2).strip()


def headingLevel_next(level: int) -> int:
    """Level for a heading nested under ``level``, capped at 6"""
    return min(level + 1, MAX_HEADING_LEVEL)


def heading_make(level: int, text: str) -> str:
    return '#' * level + ' ' + text


def titleLines_join(lines: List[str]) -> str:
    """
    Join title fragments with single spaces.

    No space is inserted before a fragment that starts with punctuation, so
    a title split as ['Create a file named', '`app.js`', '.'] reads
    'Create a file named `app.js`.'.
    """
    result = ''
    for fragment in lines:
        part = fragment.strip()
        if not part:
            continue
        if not result or TITLE_PUNCTUATION_PATTERN.match(part):
            result += part
        else:
            result += ' ' + part
    return result
