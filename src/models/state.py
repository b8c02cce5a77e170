"""
Program state model and pipeline helper

Defines the ProgramState dataclass carried through the CLI's functional
pipeline, and the pipeline() helper that composes stages left to right.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Callable, Dict, List, Optional, Type, TypeVar

from .manifest import BuildResult, SkillManifest


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the skill build pipeline (state bus pattern).

    Each stage receives a state, copies it and adds its own results.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, manifest, all, manifestDir,
          validateOnly
        - env_check: manifestsInputdir, envOK
        - manifests_load: manifestPaths, manifests
        - manifests_validate: (no additions; exits on failure)
        - skills_build: buildResults
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Repository root the manifests' source paths are relative to
        outputdir: Base directory the skills are written to
        verbosity: Logging verbosity level (1-3)
        manifest: Name of a single manifest to build (without .yaml)
        all: Build every manifest in the manifest directory
        manifestDir: Manifest directory, relative to inputdir
        validateOnly: Stop after validation
        envOK: Environment validation passed
        manifestsInputdir: Resolved manifest directory
        manifestPaths: Manifest files selected for this run
        manifests: Parsed manifests keyed by file name
        buildResults: One BuildResult per built skill
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    manifest: Optional[str] = field(default=None)
    all: bool = field(default=False)
    manifestDir: Optional[str] = field(default=None)
    validateOnly: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    manifestsInputdir: Path = field(default=Path("/"))
    manifestPaths: List[Path] = field(default_factory=list)
    manifests: Dict[str, SkillManifest] = field(default_factory=dict)
    buildResults: List[BuildResult] = field(default_factory=list)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Options that are not ProgramState fields are ignored.

        Args:
            options: Parsed CLI arguments (manifest, all, verbosity, etc.)
            inputdir: Repository root
            outputdir: Directory for generated skills

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        return cls(**{**filtered_options, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            manifests_load,
            manifests_validate,
            skills_build,
            results_report
        )

    reads left-to-right instead of inside-out.
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
