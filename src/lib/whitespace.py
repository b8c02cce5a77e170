"""
Whitespace normalizer

Final cleanup pass: separates fences and headings from surrounding prose
with exactly one blank line, collapses blank runs and trims trailing
whitespace. Fenced content is otherwise left exactly as it is.
"""

from typing import List

from ..models.markup import FrontmatterMode, LineKind
from .scanner import LineScanner, heading_parse


def _blank_ensure(output: List[str]) -> None:
    if output and output[-1] != '':
        output.append('')


def whitespace_normalize(content: str) -> str:
    """
    Normalize blank lines and trailing whitespace.

    A leading frontmatter block, if one survived earlier passes, is copied
    through with only its trailing whitespace trimmed.

    Example:
        >>> whitespace_normalize("# Title\\ntext\\n\\n\\n\\n\\nmore   ")
        '# Title\\n\\ntext\\n\\nmore'
    """
    output: List[str] = []
    separate_next = False
    scanner = LineScanner(content, frontmatter=FrontmatterMode.LEADING)

    for line in scanner:
        text = line.text.rstrip()

        if line.kind in (LineKind.FRONTMATTER_DELIMITER, LineKind.FRONTMATTER, LineKind.CODE):
            output.append(text)
            continue

        if line.kind is LineKind.FENCE:
            opening = scanner.state.in_fence
            if opening:
                _blank_ensure(output)
            output.append(text)
            separate_next = not opening
            continue

        if not line.stripped:
            _blank_ensure(output)
            separate_next = False
            continue

        if heading_parse(line.stripped):
            _blank_ensure(output)
            output.append(text)
            separate_next = True
            continue

        if separate_next:
            _blank_ensure(output)
            separate_next = False
        output.append(text)

    return '\n'.join(output)
