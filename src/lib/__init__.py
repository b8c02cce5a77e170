"""
skilldown - documentation markup to skill Markdown

Line-oriented passes that turn converted documentation markup into clean
Markdown, and the generator that assembles skills from manifests.
"""

__version__ = "1.0.0"

from .log import LOG, WARN, state_connectToLogger
from .postprocess import markdown_postprocess, passes_apply, passes_build
from .sections import sections_exclude
from .links import links_validate, url_canonicalize
from .references import referenceCache_clear, referenceTable_get, referenceTable_parse, references_resolve
from .tokens import TokenCounter, tokenBudget_check
from .manifest import ManifestValidationError, manifest_load, manifest_validate
from .generator import skill_build

__all__ = [
    "LOG",
    "WARN",
    "state_connectToLogger",
    "markdown_postprocess",
    "passes_apply",
    "passes_build",
    "sections_exclude",
    "links_validate",
    "url_canonicalize",
    "referenceCache_clear",
    "referenceTable_get",
    "referenceTable_parse",
    "references_resolve",
    "TokenCounter",
    "tokenBudget_check",
    "ManifestValidationError",
    "manifest_load",
    "manifest_validate",
    "skill_build",
    "__version__",
]
