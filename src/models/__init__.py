"""
Models package for skilldown

Contains data structures and type definitions for the markup passes, the
skill manifests and the build pipeline.
"""

from .state import ProgramState, pipeline
from .markup import (
    FrontmatterMode,
    LineKind,
    LinkMatch,
    ReferenceEntry,
    ReferenceTable,
    ScannedLine,
    ScanState,
    TokenBudget,
)
from .manifest import (
    BuildResult,
    ContentSection,
    ContentSource,
    GeneratedFile,
    ProcessedContent,
    ReferenceFile,
    SkillManifest,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "FrontmatterMode",
    "LineKind",
    "LinkMatch",
    "ReferenceEntry",
    "ReferenceTable",
    "ScannedLine",
    "ScanState",
    "TokenBudget",
    "BuildResult",
    "ContentSection",
    "ContentSource",
    "GeneratedFile",
    "ProcessedContent",
    "ReferenceFile",
    "SkillManifest",
]
