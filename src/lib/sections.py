"""
Section excluder

Drops whole sections of a document by heading text. Matching is exact and
case-sensitive: prose that merely mentions an excluded phrase survives.
"""

from typing import Iterable, List, Optional, Tuple

from .scanner import LineScanner, heading_parse, titleLines_join
from .tags import SECTION_TAGS, tag_isClosing, tag_isOpening

HEADING_TAG = 'Heading'


def _section_opens(stripped: str) -> bool:
    return tag_isOpening(stripped, SECTION_TAGS[0])


def _section_closes(stripped: str) -> bool:
    return tag_isClosing(stripped, SECTION_TAGS[0])


def headingTag_extract(lines: List[str], start: int) -> Optional[Tuple[str, int]]:
    """
    Read a multi-line <Heading> construct starting at ``lines[start]``.

    Returns:
        (joined text, index of the closing tag line), or None when the line
        does not open a heading tag or the tag is never closed
    """
    if not tag_isOpening(lines[start].strip(), HEADING_TAG):
        return None

    fragments: List[str] = []
    for index in range(start + 1, len(lines)):
        stripped = lines[index].strip()
        if tag_isClosing(stripped, HEADING_TAG):
            return titleLines_join(fragments), index
        fragments.append(stripped)
    return None


def enclosingSection_find(emitted: List[str]) -> Optional[int]:
    """
    Index of the nearest enclosing <Section> opener in already-emitted lines.

    The backward scan stops at the first closer: a heading preceded by an
    already-closed sibling section is treated as unwrapped.
    """
    for index in range(len(emitted) - 1, -1, -1):
        stripped = emitted[index].strip()
        if _section_opens(stripped):
            return index
        if _section_closes(stripped):
            return None
    return None


def sectionEnd_skip(lines: List[str], start: int) -> int:
    """Index just past the </Section> that closes a section opened before ``start``"""
    depth = 1
    index = start
    while index < len(lines) and depth > 0:
        stripped = lines[index].strip()
        if _section_opens(stripped):
            depth += 1
        elif _section_closes(stripped):
            depth -= 1
        index += 1
    return index


def sections_exclude(content: str, headings: Iterable[str]) -> str:
    """
    Remove sections whose heading exactly matches one of ``headings``.

    A literal heading '## Title' takes every following line with it up to
    the next heading of the same or higher rank. A <Heading> tag takes its
    enclosing <Section> block with it; when no enclosing section can be
    found only the heading construct itself is removed.

    Headings inside fences are code and never match.

    Example:
        >>> sections_exclude("## Keep\\nA\\n## Drop\\nB\\n## Next", ["Drop"])
        '## Keep\\nA\\n## Next'
    """
    excluded = set(headings)
    if not excluded:
        return content

    scanned = list(LineScanner(content))
    lines = [line.text for line in scanned]
    output: List[str] = []
    index = 0

    while index < len(scanned):
        line = scanned[index]
        if line.verbatim:
            output.append(line.text)
            index += 1
            continue

        parsed = heading_parse(line.stripped)
        if parsed and parsed[1] in excluded:
            rank = parsed[0]
            index += 1
            while index < len(scanned):
                following = scanned[index]
                if not following.verbatim:
                    nested = heading_parse(following.stripped)
                    if nested and nested[0] <= rank:
                        break
                index += 1
            continue

        tagged = headingTag_extract(lines, index)
        if tagged and tagged[0] in excluded:
            opener = enclosingSection_find(output)
            if opener is None:
                index = tagged[1] + 1
                continue
            del output[opener:]
            index = sectionEnd_skip(lines, tagged[1] + 1)
            continue

        output.append(line.text)
        index += 1

    return '\n'.join(output)
