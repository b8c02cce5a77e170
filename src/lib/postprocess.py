"""
Post-processing pipeline

Cleans converted documentation markup into plain Markdown by running an
ordered list of passes, each a pure function of the text it is given.
The order is a contract: heading levels are re-derived by every pass from
the text it sees, so later passes depend on headings promoted by earlier
ones. Do not merge or reorder passes.

    frontmatter strip       every '---' block
    transclusion            placeholder code blocks (needs a repo root)
    span strip              anchor <span> tags
    procedures              <Procedure>/<Step> -> '**Step N:** title'
    sections                <Section> unwrap
    examples                <Example> -> 'Example' heading
    irrelevant              navigation/metadata tags dropped with content
    headings                <Heading> -> '#' headings
    references              <Reference> -> literal text
    wrappers                <Note>/<Extract>/<Important> unwrap
    tabs                    <Tabs>/<Tab> -> one heading per tab
    io blocks               <IoCodeBlock> -> labeled Input/Output
    whitespace              blank line and trailing space cleanup
"""

from functools import partial, reduce
from pathlib import Path
from typing import Callable, List, Optional

from ..models.markup import ReferenceTable
from .converters import (
    examples_convert,
    headings_convert,
    ioblocks_convert,
    procedures_convert,
    tabs_convert,
)
from .log import LOG
from .references import referenceTable_get, references_resolve
from .tags import frontmatter_strip, irrelevant_remove, sections_unwrap, spans_remove, wrappers_unwrap
from .transclude import externalFiles_transclude
from .whitespace import whitespace_normalize

Pass = Callable[[str], str]


def passes_build(repo_root: Optional[Path] = None, references: Optional[ReferenceTable] = None) -> List[Pass]:
    """
    The ordered pass list for one document.

    Args:
        repo_root: Repository checkout; enables transclusion and is searched
            for the reference data file
        references: Explicit reference table; defaults to the process-wide
            cached table

    Returns:
        List of text -> text functions, to be applied left to right
    """
    if references is None:
        references = referenceTable_get(repo_root)

    passes: List[Pass] = [frontmatter_strip]
    if repo_root is not None:
        passes.append(partial(externalFiles_transclude, repo_root=Path(repo_root)))
    passes += [
        spans_remove,
        procedures_convert,
        sections_unwrap,
        examples_convert,
        irrelevant_remove,
        headings_convert,
        partial(references_resolve, table=references),
        wrappers_unwrap,
        tabs_convert,
        ioblocks_convert,
        whitespace_normalize,
    ]
    return passes


def passes_apply(content: str, passes: List[Pass]) -> str:
    """Thread ``content`` through ``passes`` left to right"""
    return reduce(lambda text, step: step(text), passes, content)


def markdown_postprocess(
    content: str,
    repo_root: Optional[Path] = None,
    references: Optional[ReferenceTable] = None,
) -> str:
    """
    Clean converted markup into Markdown.

    Never raises on malformed markup: unbalanced tags and fences are
    handled best-effort, and every imperfection is reported as a warning
    diagnostic rather than in the output.

    Example:
        >>> markdown_postprocess("<Note>\\n  Read this.\\n</Note>", references=ReferenceTable())
        'Read this.'
    """
    passes = passes_build(repo_root, references)
    LOG(f"Post-processing {len(content)} characters through {len(passes)} passes", level=3)
    return passes_apply(content, passes)
