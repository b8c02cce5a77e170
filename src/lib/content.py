"""
Content source processing

Turns the content sources listed in a manifest into one block of markup:
headers, inline descriptions, converted documentation pages and source
files wrapped in fenced code blocks.
"""

from pathlib import Path
from typing import List

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from ..models.manifest import ContentSource, ProcessedContent
from .log import LOG
from .scanner import heading_make
from .sections import sections_exclude

CODE_EXTENSIONS = {
    ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".go", ".rs",
    ".cpp", ".c", ".cs", ".rb", ".php", ".swift", ".kt", ".scala",
}

INLINE_SOURCE = "inline content"


def file_isCode(path: str) -> bool:
    return Path(path).suffix in CODE_EXTENSIONS


def language_fromFilename(path: str) -> str:
    """
    Fence language for a source file, from Pygments' lexer registry.

    Example:
        >>> language_fromFilename("examples/connect.py")
        'python'
    """
    try:
        return get_lexer_for_filename(path).aliases[0]
    except ClassNotFound:
        return Path(path).suffix.lstrip(".")


def codeFile_render(path: str, repo_root: Path) -> str:
    text = (Path(repo_root) / path).read_text(encoding="utf-8")
    return f"```{language_fromFilename(path)}\n{text.strip()}\n```"


def contentSource_process(source: ContentSource, repo_root: Path) -> ProcessedContent:
    """
    Render one content source.

    The optional header comes first. With a path, any inline content is
    kept as a short description ahead of the file; code files are fenced
    and every other file is taken as markup. Section exclusions are applied
    last, to this source only.

    Raises:
        OSError: when a named file cannot be read
    """
    parts: List[str] = []
    if source.header:
        parts.append(heading_make(source.level, source.header) + "\n\n")

    if source.path:
        label = source.path
        if source.content:
            parts.append(source.content.strip() + "\n\n")
        if file_isCode(source.path):
            parts.append(codeFile_render(source.path, repo_root))
        else:
            parts.append((Path(repo_root) / source.path).read_text(encoding="utf-8").strip())
    else:
        label = INLINE_SOURCE
        parts.append((source.content or "").strip())

    content = "".join(parts)
    if source.excludeSections:
        content = sections_exclude(content, source.excludeSections)
        LOG(f"Excluded sections {source.excludeSections} from {label}", level=2)

    return ProcessedContent(content=content, source=label)


def contentSources_process(sources: List[ContentSource], repo_root: Path) -> ProcessedContent:
    """Render several sources and join them with one blank line"""
    processed = [contentSource_process(source, repo_root) for source in sources]
    return ProcessedContent(
        content="\n\n".join(item.content for item in processed),
        source=", ".join(item.source for item in processed),
    )
