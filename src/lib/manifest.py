"""
Manifest loading and validation

Manifests are YAML files validated against the SkillManifest schema. Every
problem found is collected and reported at once in a single
ManifestValidationError.
"""

from pathlib import Path
from typing import List, Tuple

import yaml
from pydantic import ValidationError

from ..models.manifest import SkillManifest
from .log import LOG

MANIFEST_SUFFIX = ".yaml"


class ManifestValidationError(ValueError):
    """Raised when a manifest cannot be loaded or fails validation"""


def schemaErrors_format(error: ValidationError) -> List[str]:
    """One readable line per pydantic error, e.g. 'mainContent.sources: ...'"""
    messages: List[str] = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "manifest"
        messages.append(f"{location}: {item['msg']}")
    return messages


def manifest_parse(text: str, origin: str = "<string>") -> SkillManifest:
    """
    Parse and schema-check manifest text.

    Raises:
        ManifestValidationError: on YAML syntax errors or schema violations
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestValidationError(f"Failed to load manifest {origin}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestValidationError(f"Failed to load manifest {origin}: expected a mapping")

    try:
        return SkillManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestValidationError(
            "Manifest validation failed:\n" + "\n".join(schemaErrors_format(e))
        ) from e


def manifest_load(path: Path) -> SkillManifest:
    """Read and schema-check one manifest file"""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestValidationError(f"Failed to load manifest {path}: {e}") from e
    LOG(f"Loaded manifest {path}", level=2)
    return manifest_parse(text, str(path))


def manifestPaths_find(directory: Path) -> List[Path]:
    """All manifests in a directory, sorted by name"""
    return sorted(Path(directory).glob(f"*{MANIFEST_SUFFIX}"))


def sourceFiles_collect(manifest: SkillManifest) -> List[Tuple[str, str]]:
    """(path, context) for every file-backed content source in a manifest"""
    files: List[Tuple[str, str]] = []
    for index, source in enumerate(manifest.mainContent.sources):
        if source.path:
            files.append((source.path, f"mainContent.sources[{index}]"))
    for ref_index, reference in enumerate(manifest.references):
        for index, source in enumerate(reference.sources):
            if source.path:
                files.append(
                    (source.path, f"references[{ref_index}].sources[{index}] ({reference.filename})")
                )
    return files


def manifestFiles_validate(manifest: SkillManifest, repo_root: Path) -> None:
    """
    Check that every file a manifest names exists under the repository root.

    Raises:
        ManifestValidationError: listing every missing file
    """
    errors = [
        f"File not found: {path} (referenced in {context})"
        for path, context in sourceFiles_collect(manifest)
        if not (Path(repo_root) / path).exists()
    ]
    if errors:
        raise ManifestValidationError("File validation failed:\n" + "\n".join(errors))


def manifest_validate(manifest: SkillManifest, repo_root: Path) -> None:
    """Full validation of an already-parsed manifest"""
    manifestFiles_validate(manifest, repo_root)
    LOG(f"Manifest '{manifest.id}' validated", level=2)
