"""
Skill manifest schema

Pydantic models for the YAML manifests that describe a skill, plus the
plain result containers produced while building one. Field names follow
the manifest's own camelCase keys.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


class ContentSource(BaseModel):
    """One source of content: a file in the repository and/or inline text."""
    path: Optional[str] = Field(None, description="File relative to the repository root")
    content: Optional[str] = Field(None, description="Inline Markdown")
    header: Optional[str] = Field(None, description="Heading emitted before this source")
    level: int = Field(default=2, ge=1, le=6, description="Heading level for header")
    excludeSections: List[str] = Field(
        default_factory=list, description="Exact heading texts whose sections are dropped"
    )

    @model_validator(mode="after")
    def source_hasBody(self) -> "ContentSource":
        if not self.path and not self.content:
            raise ValueError("ContentSource must have either 'path' or 'content'")
        return self


class ContentSection(BaseModel):
    """Main SKILL.md content: one or several sources."""
    type: Literal["single", "composite"]
    sources: List[ContentSource] = Field(min_length=1)


class ReferenceFile(BaseModel):
    """A reference file written to references/ and linked from SKILL.md."""
    filename: str
    title: Optional[str] = None
    linkText: Optional[str] = None
    description: Optional[str] = None
    sources: List[ContentSource] = Field(min_length=1)
    maxTokens: Optional[int] = Field(None, gt=0)

    @property
    def link_label(self) -> str:
        return self.linkText or self.title or self.filename


class SkillManifest(BaseModel):
    """Complete description of one skill."""
    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    mainContent: ContentSection
    references: List[ReferenceFile] = Field(default_factory=list)
    includeReferenceDescriptions: bool = False
    maxTokens: Optional[int] = Field(None, gt=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)


@dataclass
class ProcessedContent:
    """
    Markup assembled from one or more content sources.

    Attributes:
        content: The combined text
        source: Where it came from, for diagnostics
    """
    content: str
    source: str


@dataclass
class GeneratedFile:
    """Final text of one output file with its measured size and advisories"""
    content: str
    tokens: int
    warnings: List[str] = field(default_factory=list)


@dataclass
class BuildResult:
    """
    Outcome of building one skill.

    Attributes:
        id: Skill id
        skillPath: Written SKILL.md
        referencePaths: Written reference files, in manifest order
        mainTokens: Token count of SKILL.md
        referenceTokens: filename -> token count
        warnings: Token budget advisories collected during the build
    """
    id: str
    skillPath: Path
    referencePaths: List[Path] = field(default_factory=list)
    mainTokens: int = 0
    referenceTokens: Dict[str, int] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
