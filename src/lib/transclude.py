"""
External-file transclusion

Upstream conversion leaves placeholder code blocks for snippets it could not
inline:

    ```javascript
    // Source: /includes/fts/list-indexes.js
    // TODO: Content from external file not available during conversion
    ```

When the repository checkout has the file, the block body is replaced by
the file contents.
"""

import re
from pathlib import Path
from typing import List, Optional

from ..config import appsettings
from ..models.markup import LineKind
from .log import LOG, WARN
from .scanner import LineScanner

SOURCE_COMMENT = re.compile(r'^(?://|#)\s*Source:\s*(\S+)')
PLACEHOLDER_MARKER = 'TODO: Content from external file not available during conversion'
INDENT_PATTERN = re.compile(r'^(\s*)')


def placeholder_source(body: List[str]) -> Optional[str]:
    """Source path named by a placeholder block body, if it is one"""
    source: Optional[str] = None
    marked = False
    for line in body:
        stripped = line.strip()
        match = SOURCE_COMMENT.match(stripped)
        if match:
            source = match.group(1)
        if PLACEHOLDER_MARKER in stripped:
            marked = True
    return source if marked else None


def externalFile_read(source: str, repo_root: Path) -> Optional[List[str]]:
    """
    Lines of the file behind a placeholder, without trailing blank lines.

    Returns None, with a warning, when the file cannot be read.
    """
    path = Path(repo_root) / appsettings.transclusion_root / source.lstrip('/')
    try:
        lines = path.read_text(encoding='utf-8').split('\n')
    except OSError as e:
        WARN(f"Could not transclude file {path}: {e}")
        return None
    while lines and not lines[-1].strip():
        lines.pop()
    LOG(f"Transcluded {path}", level=2)
    return lines


def externalFiles_transclude(content: str, repo_root: Path) -> str:
    """
    Fill placeholder code blocks from files under the repository root.

    Fence delimiters are kept; every transcluded line gets the indentation
    of the opening fence. Blocks that are not placeholders, or whose file is
    missing, are copied through unchanged. An unclosed fence is copied
    through as is.
    """
    output: List[str] = []
    opener: Optional[str] = None
    body: List[str] = []

    for line in LineScanner(content):
        if opener is None:
            if line.kind is LineKind.FENCE:
                opener = line.text
                body = []
            else:
                output.append(line.text)
            continue

        if line.kind is LineKind.FENCE:
            replacement = None
            source = placeholder_source(body)
            if source:
                replacement = externalFile_read(source, repo_root)
            output.append(opener)
            if replacement is None:
                output.extend(body)
            else:
                indent = INDENT_PATTERN.match(opener).group(1)
                output.extend(indent + text for text in replacement)
            output.append(line.text)
            opener = None
            continue

        body.append(line.text)

    if opener is not None:
        output.append(opener)
        output.extend(body)

    return '\n'.join(output)
