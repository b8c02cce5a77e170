#!/usr/bin/env python3
"""
skilldown - documentation markup to skill Markdown

Builds agent skills from converted documentation pages. A skill is a
directory holding a SKILL.md file and optional reference files, assembled
from the sources listed in a YAML manifest and cleaned into plain Markdown.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Always produce usable output: malformed markup, unresolved references
      and broken links degrade gracefully and are reported as warnings
    - Manifest-driven: what goes into a skill is declared, not coded
    - Progressive disclosure: SKILL.md stays small and links to references

Usage:
    skilldown inputdir/ outputdir/ --manifest atlas-search

    inputdir is the documentation repository checkout; manifests are read
    from inputdir/<manifestDir> and skills written to outputdir/<id>/.

Examples:
    # Build one skill
    skilldown . skills/ --manifest atlas-search

    # Build every manifest
    skilldown . skills/ --all

    # Only check a manifest and the files it names
    skilldown . skills/ --manifest atlas-search --validateOnly

    # Verbose output
    skilldown . skills/ --all -vv
"""

import asyncio
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import __version__, LOG, state_connectToLogger
from .lib.generator import skill_build
from .lib.manifest import (
    MANIFEST_SUFFIX,
    ManifestValidationError,
    manifest_load,
    manifest_validate,
    manifestPaths_find,
)
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
       _    _ _ _     _
   ___| | _(_) | | __| | _____      ___ __
  / __| |/ / | | |/ _` |/ _ \ \ /\ / / '_ \
  \__ \   <| | | | (_| | (_) \ V  V /| | | |
  |___/_|\_\_|_|_|\__,_|\___/ \_/\_/ |_| |_|

  Documentation markup to skill Markdown
"""

# Define CLI arguments
parser = ArgumentParser(
    description="skilldown - build agent skills from documentation markup",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--manifest",
    default=None,
    type=str,
    help="Name of the manifest to build (without .yaml extension)",
)

parser.add_argument("--all", action="store_true", default=False, help="Build every manifest")

parser.add_argument(
    "--manifestDir",
    default=None,
    type=str,
    help=f"Manifest directory relative to inputdir (default from settings: {appsettings.manifest_dir})",
)

parser.add_argument(
    "--validateOnly",
    action="store_true",
    default=False,
    help="Only validate the manifest(s) without building",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the command line and resolve the manifest directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - manifestsInputdir: Resolved manifest directory
            - envOK: True if environment is valid

    Exits:
        1 if neither or both of --manifest/--all are given, or the manifest
        directory does not exist
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if bool(state.manifest) == state.all:
        print("Error: Please specify a manifest name or use --all", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.manifestsInputdir = state.inputdir / (state.manifestDir or appsettings.manifest_dir)
    if not state.manifestsInputdir.is_dir():
        print(f"Error: Manifest directory not found: {state.manifestsInputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Manifest directory: {state.manifestsInputdir}", level=2)

    if not state.validateOnly:
        state.outputdir.mkdir(parents=True, exist_ok=True)
        LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def manifests_load(inputstate: ProgramState) -> ProgramState:
    """
    Select and parse the manifests for this run.

    Returns:
        ProgramState with added fields:
            - manifestPaths: Manifest files selected
            - manifests: Parsed manifests keyed by file name

    Exits:
        1 if a manifest is missing, unreadable or fails schema validation
    """

    state = inputstate.copy()

    if state.all:
        LOG("Finding all manifests...", level=1)
        state.manifestPaths = manifestPaths_find(state.manifestsInputdir)
        LOG(f"Found {len(state.manifestPaths)} manifest(s)", level=1)
    else:
        state.manifestPaths = [state.manifestsInputdir / f"{state.manifest}{MANIFEST_SUFFIX}"]

    state.manifests = {}
    for path in state.manifestPaths:
        LOG(f"Loading manifest: {path.name}", level=1)
        try:
            state.manifests[path.name] = manifest_load(path)
        except ManifestValidationError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    return state


def manifests_validate(inputstate: ProgramState) -> ProgramState:
    """
    Check that every file named by the loaded manifests exists.

    Returns:
        ProgramState unchanged

    Exits:
        1 on the first manifest that names a missing file
    """

    state = inputstate.copy()

    for name, manifest in state.manifests.items():
        LOG(f"Validating manifest {name}...", level=1)
        try:
            manifest_validate(manifest, state.inputdir)
        except ManifestValidationError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        LOG("✓ Manifest validation passed", level=1)

    if state.validateOnly:
        LOG("Validation complete (--validateOnly mode)", level=1)
    return state


def skills_build(inputstate: ProgramState) -> ProgramState:
    """
    Build every loaded manifest into outputdir.

    Returns:
        ProgramState with added field:
            - buildResults: One BuildResult per skill

    Exits:
        1 if a source file cannot be read or a skill cannot be written
    """

    state = inputstate.copy()
    if state.validateOnly:
        return state

    state.buildResults = []
    for name, manifest in state.manifests.items():
        LOG(f"Building skill {manifest.id} from {name}...", level=1)
        try:
            result = asyncio.run(skill_build(manifest, state.inputdir, state.outputdir))
        except OSError as e:
            print(f"Build error: {e}", file=sys.stderr)
            if state.verbosity >= 3:
                import traceback

                traceback.print_exc()
            sys.exit(1)
        state.buildResults.append(result)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display build results to the user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    for result in state.buildResults:
        LOG(f"\n✓ Skill built successfully: {result.id}", level=1)
        LOG(f"  SKILL.md: {result.skillPath}", level=1)
        LOG(f"  Main content tokens: {result.mainTokens}", level=1)
        if result.referencePaths:
            LOG(f"  Reference files: {len(result.referencePaths)}", level=1)
            for filename, tokens in result.referenceTokens.items():
                LOG(f"    - {filename}: {tokens} tokens", level=1)
        if result.warnings:
            print("\nWarnings:", file=sys.stderr)
            for warning in result.warnings:
                print(f"  ⚠ {warning}", file=sys.stderr)

    if state.buildResults and state.all:
        LOG("\n✓ All skills built successfully", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="skilldown - documentation markup to skill Markdown",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - build skills from manifests.

    Orchestrates the full pipeline:
        1. env_check: Validate options and the manifest directory
        2. manifests_load: Select and parse manifests
        3. manifests_validate: Check the files they name
        4. skills_build: Generate SKILL.md and reference files
        5. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Documentation repository root
        outputdir: Directory where skills will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, manifests_load, manifests_validate, skills_build, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
