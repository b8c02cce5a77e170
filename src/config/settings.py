"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use SKILLDOWN_ prefix (e.g., SKILLDOWN_DOCS_DOMAIN=example.com).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use SKILLDOWN_ prefix.

    Examples:
        SKILLDOWN_DOCS_DOMAIN=docs.example.com
        SKILLDOWN_LINK_PROBE_TIMEOUT=2.5
        SKILLDOWN_VALIDATE_LINKS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="SKILLDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Link validation
    docs_domain: str = Field(
        default="mongodb.com",
        description="Documentation hostname whose /docs/ and /developer/ links are probed",
    )

    link_probe_timeout: float = Field(
        default=5.0,
        description="Timeout in seconds for a single link reachability probe",
    )

    validate_links: bool = Field(
        default=True,
        description="Probe and rewrite documentation links during skill generation",
    )

    # Reference resolution
    references_file: str = Field(
        default="content-mdx/atlas/_references.ts",
        description="Companion file holding the substitution and named-reference tables",
    )

    # Transclusion
    transclusion_root: str = Field(
        default="content/atlas/source",
        description="Directory (relative to repo root) that '// Source: /includes/...' paths resolve against",
    )

    # Token budget
    token_encoding: str = Field(
        default="cl100k_base",
        description="tiktoken encoding used to measure generated documents",
    )

    # CLI
    manifest_dir: str = Field(
        default="manifests",
        description="Directory (relative to inputdir) holding skill manifest YAML files",
    )

    def referencePaths_candidates(self, repo_root: Optional[Path] = None) -> List[Path]:
        """
        List the locations searched for the reference data file, in order.

        Args:
            repo_root: Optional repository root to search before the cwd

        Returns:
            Candidate paths; an absolute references_file yields just itself

        Example:
            >>> settings = AppSettings(references_file="/tmp/refs.ts")
            >>> settings.referencePaths_candidates()
            [PosixPath('/tmp/refs.ts')]
        """
        configured = Path(self.references_file)
        if configured.is_absolute():
            return [configured]

        candidates: List[Path] = []
        if repo_root is not None:
            candidates.append(Path(repo_root) / configured)
        candidates.append(Path.cwd() / configured)
        candidates.append(Path.cwd().parent / configured)
        return candidates


# Singleton instance - import this in your code
appsettings = AppSettings()
