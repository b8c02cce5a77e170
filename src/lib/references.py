"""
Reference resolver

Replaces symbolic <Reference> tags with literal text:

    <Reference key="fts" type="substitution" />  -> substitutions["fts"]
    <Reference name="pipe.$search" />            -> refs["pipe.$search"].title

The tables come from a companion data file declaring two flat tables:

    export const substitutions = {
      "fts": "MongoDB Search",
    } as const;

    export const refs = {
      "pipe.$search": { title: "$search", url: "https://..." },
    } as const;

The file is scanned with patterns, not evaluated. It is loaded at most once
per process; callers that need isolation pass their own ReferenceTable.
"""

import re
from pathlib import Path
from typing import List, Optional

from ..config import appsettings
from ..models.markup import ReferenceEntry, ReferenceTable
from .log import LOG, WARN
from .scanner import LineScanner

SUBSTITUTIONS_BLOCK = re.compile(
    r'substitutions\s*=\s*\{(.*?)\}\s*(?:as\s+const\s*)?;', re.DOTALL
)
REFS_BLOCK = re.compile(r'refs\s*=\s*\{(.*?)\}\s*(?:as\s+const\s*)?;', re.DOTALL)
SUBSTITUTION_PAIR = re.compile(r'"([^"]+)"\s*:\s*"([^"]+)"')
REF_ENTRY = re.compile(
    r'"([^"]+)"\s*:\s*\{\s*"?title"?\s*:\s*"([^"]+)"\s*,\s*"?url"?\s*:\s*"([^"]+)"\s*,?\s*\}'
)

SUBSTITUTION_TAG = re.compile(r'<Reference\s+key="([^"]+)"\s+type="substitution"\s*/>')
NAME_TAG = re.compile(r'<Reference\s+name="([^"]+)"\s*/>')

_reference_cache: Optional[ReferenceTable] = None


def referenceTable_parse(text: str) -> ReferenceTable:
    """
    Parse the substitution and named-reference tables out of a data file.

    Args:
        text: Contents of the reference data file

    Returns:
        ReferenceTable; a table missing from the file is left empty
    """
    table = ReferenceTable()

    block = SUBSTITUTIONS_BLOCK.search(text)
    if block:
        for key, value in SUBSTITUTION_PAIR.findall(block.group(1)):
            table.substitutions[key] = value

    block = REFS_BLOCK.search(text)
    if block:
        for name, title, url in REF_ENTRY.findall(block.group(1)):
            table.refs[name] = ReferenceEntry(title=title, url=url)

    return table


def referenceTable_load(candidates: List[Path]) -> ReferenceTable:
    """
    Load the reference table from the first readable candidate path.

    An absent file is not an error: empty tables are returned and a
    diagnostic is emitted.
    """
    for path in candidates:
        try:
            text = path.read_text(encoding='utf-8')
        except OSError:
            continue
        table = referenceTable_parse(text)
        LOG(
            f"Loaded {len(table.substitutions)} substitutions and "
            f"{len(table.refs)} references from {path}",
            level=2,
        )
        return table

    WARN(f"Could not load reference data file (tried: {', '.join(str(p) for p in candidates)})")
    return ReferenceTable()


def referenceTable_get(repo_root: Optional[Path] = None) -> ReferenceTable:
    """
    Process-wide reference table, loaded on first use.

    The first caller's search paths win; later calls return the cached
    table until referenceCache_clear() is called.
    """
    global _reference_cache
    if _reference_cache is None:
        _reference_cache = referenceTable_load(appsettings.referencePaths_candidates(repo_root))
    return _reference_cache


def referenceCache_clear() -> None:
    global _reference_cache
    _reference_cache = None


def referenceLine_resolve(line: str, table: ReferenceTable) -> str:
    """Resolve every <Reference> tag on one line; unresolved tags stay put"""

    def substitution_replace(match: re.Match) -> str:
        value = table.substitution_get(match.group(1))
        if value is None:
            WARN(f"Unresolved substitution reference: {match.group(1)}")
            return match.group(0)
        return value

    def name_replace(match: re.Match) -> str:
        title = table.title_get(match.group(1))
        if title is None:
            WARN(f"Unresolved name reference: {match.group(1)}")
            return match.group(0)
        return title

    line = SUBSTITUTION_TAG.sub(substitution_replace, line)
    return NAME_TAG.sub(name_replace, line)


def references_resolve(content: str, table: Optional[ReferenceTable] = None) -> str:
    """
    Resolve <Reference> tags outside fences.

    Args:
        content: Document text
        table: Lookup tables; defaults to the process-wide cached table

    Returns:
        Document with every resolvable reference replaced by its text
    """
    if table is None:
        table = referenceTable_get()

    output: List[str] = []
    for line in LineScanner(content):
        if line.verbatim or '<Reference' not in line.text:
            output.append(line.text)
            continue
        output.append(referenceLine_resolve(line.text, table))
    return '\n'.join(output)
