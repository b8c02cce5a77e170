"""
Generic tag-scope engine

Line-oriented, fence-aware removal of custom block tags layered over
Markdown. Two modes:

- dedent-and-keep (``tags_unwrap``): the wrapper tags are dropped and the
  enclosed content is outdented by the scope's indent, tracked on a stack
  so nested containers accumulate correctly.
- remove-subtree (``tags_removeSubtree``): the tags and everything between
  them are dropped.

Tags inside fences are never touched. Fenced lines inside a kept scope get
the same dedent as the prose around them.

Also home to the frontmatter stripper and the inline <span> stripper, which
share the same scanning rules.
"""

import re
from functools import lru_cache
from typing import Callable, Iterable, List, Optional, Pattern

from ..models.markup import FrontmatterMode, LineKind
from .scanner import LineScanner, leadingSpaces_count, line_dedent

SECTION_TAGS = ('Section',)
WRAPPER_TAGS = ('Note', 'Extract', 'Important')

# Metadata and navigation: domain markers, toctrees, facets, "On this page"
# contents, related-content lists
IRRELEVANT_TAGS = ('DefaultDomain', 'Toctree', 'Facet', 'Contents', 'Seealso')

SCOPE_INDENT = 2

SPAN_SELF_CLOSING = re.compile(r'<span\s[^>]*/>')
SPAN_OPENING = re.compile(r'<span[^>]*>')
SPAN_CLOSING = re.compile(r'</span>')


@lru_cache(maxsize=None)
def _opening_pattern(name: str) -> Pattern[str]:
    return re.compile(rf'^<{re.escape(name)}(?:\s[^>]*)?>$')


@lru_cache(maxsize=None)
def _selfClosing_pattern(name: str) -> Pattern[str]:
    return re.compile(rf'^<{re.escape(name)}(?:\s[^>]*)?/>$')


@lru_cache(maxsize=None)
def _sameLine_pattern(name: str) -> Pattern[str]:
    return re.compile(rf'^<{re.escape(name)}(?:\s[^>]*)?>(.*)</{re.escape(name)}>$')


def tag_isOpening(stripped: str, name: str) -> bool:
    """
    Check for a lone opening tag: '<Name>' or '<Name attr="...">'

    Self-closing tags and tags with other names sharing a prefix
    ('<Tabs>' vs '<Tab>') do not match.
    """
    if stripped.endswith('/>'):
        return False
    return bool(_opening_pattern(name).match(stripped))


def tag_isClosing(stripped: str, name: str) -> bool:
    return stripped == f'</{name}>'


def tag_isSelfClosing(stripped: str, name: str) -> bool:
    return bool(_selfClosing_pattern(name).match(stripped))


def tag_sameLineContent(stripped: str, name: str) -> Optional[str]:
    """Inner text of '<Name ...>text</Name>' on one line, else None"""
    match = _sameLine_pattern(name).match(stripped)
    return match.group(1) if match else None


def tag_isSameLine(stripped: str, name: str) -> bool:
    return tag_sameLineContent(stripped, name) is not None


def tag_attribute(stripped: str, attribute: str) -> Optional[str]:
    """Value of a double-quoted attribute on a tag line, else None"""
    match = re.search(rf'\b{re.escape(attribute)}="([^"]*)"', stripped)
    return match.group(1) if match else None


def tag_matchAny(
    stripped: str, names: Iterable[str], matcher: Callable[[str, str], bool]
) -> Optional[str]:
    """First tag name in ``names`` for which ``matcher`` accepts the line"""
    for name in names:
        if matcher(stripped, name):
            return name
    return None


def frontmatter_strip(content: str) -> str:
    """
    Remove every '---'-delimited frontmatter block in the document.

    Both delimiter lines and everything between them are dropped. A '---'
    inside a fence is code, and a fence marker inside frontmatter is
    frontmatter. Absence of frontmatter is a no-op.
    """
    output: List[str] = []
    for line in LineScanner(content, frontmatter=FrontmatterMode.ALL):
        if line.kind in (LineKind.FRONTMATTER_DELIMITER, LineKind.FRONTMATTER):
            continue
        output.append(line.text)
    return '\n'.join(output)


def spans_remove(content: str) -> str:
    """
    Strip <span> anchor tags, keeping any surrounding text.

    A line that held nothing but span tags is dropped; blank lines are kept.
    """
    output: List[str] = []
    for line in LineScanner(content):
        if line.verbatim or not line.stripped:
            output.append(line.text)
            continue

        cleaned = SPAN_SELF_CLOSING.sub('', line.text)
        cleaned = SPAN_OPENING.sub('', cleaned)
        cleaned = SPAN_CLOSING.sub('', cleaned)

        if not cleaned.strip():
            continue
        output.append(cleaned)
    return '\n'.join(output)


def tags_unwrap(content: str, tag_names: Iterable[str], from_tag: bool = True) -> str:
    """
    Remove wrapper tags and outdent their content.

    Each opening tag pushes a dedent amount onto the scope stack and every
    following line, fenced or not, is dedented by the innermost amount. With
    ``from_tag`` the amount is the tag's own indent + 2, so a container
    indented anywhere lands flush left; without it the amount is the
    enclosing scope's + 2, so content nested in a list item keeps the
    item's indent. A closing tag pops. An unclosed tag dedents the rest of the document; a
    stray closer is dropped without effect. Self-closing tags are dropped;
    '<Tag>text</Tag>' on one line keeps its text.

    Example:
        >>> tags_unwrap("<Note>\\n  Read this.\\n</Note>", ["Note"])
        'Read this.'
    """
    names = tuple(tag_names)
    output: List[str] = []
    scanner = LineScanner(content)

    for line in scanner:
        state = scanner.state
        if line.verbatim:
            output.append(line_dedent(line.text, state.scope_indent()))
            continue

        if tag_matchAny(line.stripped, names, tag_isSelfClosing):
            continue

        inline_name = tag_matchAny(line.stripped, names, tag_isSameLine)
        if inline_name:
            inner = tag_sameLineContent(line.stripped, inline_name).strip()
            if inner:
                indent = ' ' * leadingSpaces_count(line.text)
                output.append(line_dedent(indent + inner, state.scope_indent()))
            continue

        if tag_matchAny(line.stripped, names, tag_isOpening):
            base = leadingSpaces_count(line.text) if from_tag else state.scope_indent()
            state.scope_push(base + SCOPE_INDENT)
            continue

        if tag_matchAny(line.stripped, names, tag_isClosing):
            state.scope_pop()
            continue

        output.append(line_dedent(line.text, state.scope_indent()))

    return '\n'.join(output)


def tags_removeSubtree(content: str, tag_names: Iterable[str]) -> str:
    """
    Remove tags together with everything they enclose.

    While suppressing, only the matching closing tag ends suppression;
    nested tags of other kinds are dropped with the rest. An unclosed tag
    suppresses to the end of the document.
    """
    names = tuple(tag_names)
    output: List[str] = []
    suppressing: Optional[str] = None

    for line in LineScanner(content):
        if suppressing is not None:
            if line.kind is LineKind.TEXT and tag_isClosing(line.stripped, suppressing):
                suppressing = None
            continue

        if line.verbatim:
            output.append(line.text)
            continue

        if tag_matchAny(line.stripped, names, tag_isSelfClosing):
            continue
        if tag_matchAny(line.stripped, names, tag_isSameLine):
            continue

        opened = tag_matchAny(line.stripped, names, tag_isOpening)
        if opened:
            suppressing = opened
            continue

        if tag_matchAny(line.stripped, names, tag_isClosing):
            continue

        output.append(line.text)

    return '\n'.join(output)


def sections_unwrap(content: str) -> str:
    """Remove <Section> containers, keeping their content"""
    return tags_unwrap(content, SECTION_TAGS)


def wrappers_unwrap(content: str) -> str:
    """Remove <Note>/<Extract>/<Important> wrappers, keeping their content"""
    return tags_unwrap(content, WRAPPER_TAGS, from_tag=False)


def irrelevant_remove(content: str) -> str:
    """Remove navigation and metadata tags along with their content"""
    return tags_removeSubtree(content, IRRELEVANT_TAGS)
