"""
Markup scanning data models

Transient, in-memory structures shared by the normalization passes: the
per-pass scan state, classified lines, reference tables, link matches and
token budget results. Nothing here is persisted.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, List, Optional


class FrontmatterMode(Enum):
    """
    How a LineScanner treats '---' delimiter lines

    IGNORE: delimiters are ordinary text
    ALL: every delimiter-bounded block anywhere in the document is frontmatter
    LEADING: only a block opening at the first non-blank line is frontmatter
    """
    IGNORE = "ignore"
    ALL = "all"
    LEADING = "leading"


class LineKind(Enum):
    """Classification of a scanned line"""
    TEXT = "text"                    # ordinary markup outside fences
    FENCE = "fence"                  # a fence delimiter (opening or closing)
    CODE = "code"                    # a line strictly inside a fence
    FRONTMATTER_DELIMITER = "fm-delimiter"
    FRONTMATTER = "frontmatter"      # a line strictly inside a frontmatter block


@dataclass
class ScanState:
    """
    Mutable state carried by one pass over a document

    Reset at the start of every pass. The scope stack holds pending dedent
    amounts for dedent-and-keep containers; an unmatched pop is ignored.

    Attributes:
        in_fence: Cursor is inside a verbatim code fence
        in_frontmatter: Cursor is inside a frontmatter block
        frontmatter_closed: A frontmatter block has already been closed
        content_seen: A non-blank line has been scanned
        scope_stack: Pending dedent amounts, innermost last
    """
    in_fence: bool = False
    in_frontmatter: bool = False
    frontmatter_closed: bool = False
    content_seen: bool = False
    scope_stack: List[int] = field(default_factory=list)

    def scope_push(self, amount: int) -> None:
        self.scope_stack.append(amount)

    def scope_pop(self) -> Optional[int]:
        if not self.scope_stack:
            return None
        return self.scope_stack.pop()

    def scope_indent(self) -> int:
        """Dedent amount of the innermost open scope (0 when none)"""
        return self.scope_stack[-1] if self.scope_stack else 0


@dataclass
class ScannedLine:
    """
    One line of a document as seen by a pass

    Attributes:
        index: Zero-based line index in the scanned document
        text: The raw line, without its line break
        stripped: text with surrounding whitespace removed
        kind: LineKind classification
    """
    index: int
    text: str
    stripped: str
    kind: LineKind

    @property
    def number(self) -> int:
        """One-based line number for diagnostics"""
        return self.index + 1

    @property
    def verbatim(self) -> bool:
        """True for fence delimiters and fenced content"""
        return self.kind in (LineKind.FENCE, LineKind.CODE)


@dataclass
class ReferenceEntry:
    """A named reference: display title and target URL"""
    title: str
    url: str


@dataclass
class ReferenceTable:
    """
    Lookup tables for <Reference> resolution

    Attributes:
        substitutions: symbol key -> literal substitution text
        refs: symbol name -> ReferenceEntry
    """
    substitutions: Dict[str, str] = field(default_factory=dict)
    refs: Dict[str, ReferenceEntry] = field(default_factory=dict)

    def substitution_get(self, key: str) -> Optional[str]:
        return self.substitutions.get(key) or None

    def title_get(self, name: str) -> Optional[str]:
        entry = self.refs.get(name)
        return entry.title if entry else None


@dataclass
class LinkMatch:
    """
    A documentation link found on a single line

    Attributes:
        full_match: The complete '[text](url)' construct as it appears
        link_text: The bracketed text
        url: The target URL with any trailing slash excluded
    """
    full_match: str
    link_text: str
    url: str


@dataclass
class TokenBudget:
    """
    Result of measuring a document against an optional token ceiling

    Attributes:
        tokens: Measured token count
        warning: Advisory message when the ceiling is exceeded, else None
    """
    tokens: int
    warning: Optional[str] = None
