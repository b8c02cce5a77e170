"""
Skill generator

Builds a skill directory from a manifest:

    <output>/<id>/SKILL.md
    <output>/<id>/references/<filename>

Every file goes through the same chain: assemble the sources, post-process
the markup, validate documentation links, then measure it against the
manifest's token budget. SKILL.md gets its frontmatter after
post-processing, since the post-processor strips frontmatter.
"""

from pathlib import Path
from typing import List, Optional

from ..config import appsettings
from ..models.manifest import BuildResult, GeneratedFile, ReferenceFile, SkillManifest
from ..models.markup import ReferenceTable
from .content import contentSources_process
from .links import Probe, links_validate
from .log import LOG
from .postprocess import markdown_postprocess
from .tokens import TokenCounter, tokenBudget_check

SKILL_FILENAME = "SKILL.md"
REFERENCES_DIRNAME = "references"


def frontmatter_make(manifest: SkillManifest) -> str:
    return f"---\nname: {manifest.id}\ndescription: {manifest.description}\n---"


def referenceLinks_make(manifest: SkillManifest) -> str:
    """
    Bulleted links to the reference files, e.g.

        - [Configure Docker](references/configure-docker.md) - When running locally
    """
    links: List[str] = []
    for reference in manifest.references:
        link = f"- [{reference.link_label}]({REFERENCES_DIRNAME}/{reference.filename})"
        if manifest.includeReferenceDescriptions and reference.description:
            link += f" - {reference.description}"
        links.append(link)
    return "\n".join(links)


async def markup_finish(
    content: str,
    label: str,
    repo_root: Path,
    references: Optional[ReferenceTable],
    probe: Optional[Probe],
) -> str:
    content = markdown_postprocess(content, repo_root=repo_root, references=references)
    if appsettings.validate_links:
        content = await links_validate(content, label, probe=probe)
    return content


async def skillFile_generate(
    manifest: SkillManifest,
    repo_root: Path,
    counter: TokenCounter,
    references: Optional[ReferenceTable] = None,
    probe: Optional[Probe] = None,
) -> GeneratedFile:
    """
    Render SKILL.md: title, main content and reference links.

    Args:
        manifest: The skill manifest
        repo_root: Repository checkout the sources are read from
        counter: Token counter for the budget check
        references: Reference table; defaults to the process-wide one
        probe: Link probe override

    Returns:
        GeneratedFile with the final text and any budget advisory
    """
    processed = contentSources_process(manifest.mainContent.sources, repo_root)

    content = f"# {manifest.title}\n\n{processed.content}"
    if manifest.references:
        content += "\n\n" + referenceLinks_make(manifest)

    content = await markup_finish(content, SKILL_FILENAME, repo_root, references, probe)
    content = frontmatter_make(manifest) + "\n\n" + content

    budget = tokenBudget_check(content, manifest.maxTokens, "Main SKILL.md", counter)
    return GeneratedFile(
        content=content,
        tokens=budget.tokens,
        warnings=[budget.warning] if budget.warning else [],
    )


async def referenceFile_generate(
    reference: ReferenceFile,
    repo_root: Path,
    counter: TokenCounter,
    references: Optional[ReferenceTable] = None,
    probe: Optional[Probe] = None,
) -> GeneratedFile:
    """Render one reference file: optional title, then its sources"""
    processed = contentSources_process(reference.sources, repo_root)

    content = processed.content
    if reference.title:
        content = f"# {reference.title}\n\n{content}"

    content = await markup_finish(content, reference.filename, repo_root, references, probe)

    budget = tokenBudget_check(
        content, reference.maxTokens, f"Reference file: {reference.filename}", counter
    )
    return GeneratedFile(
        content=content,
        tokens=budget.tokens,
        warnings=[budget.warning] if budget.warning else [],
    )


async def skill_build(
    manifest: SkillManifest,
    repo_root: Path,
    output_dir: Path,
    counter: Optional[TokenCounter] = None,
    references: Optional[ReferenceTable] = None,
    probe: Optional[Probe] = None,
) -> BuildResult:
    """
    Build and write a complete skill.

    Args:
        manifest: Validated skill manifest
        repo_root: Repository checkout the sources are read from
        output_dir: Base directory; the skill is written to output_dir/<id>
        counter: Token counter; a default tiktoken counter when omitted
        references: Reference table; defaults to the process-wide one
        probe: Link probe override

    Returns:
        BuildResult with written paths, token counts and advisories
    """
    counter = counter or TokenCounter()
    repo_root = Path(repo_root)
    skill_dir = Path(output_dir) / manifest.id
    skill_dir.mkdir(parents=True, exist_ok=True)

    skill = await skillFile_generate(manifest, repo_root, counter, references, probe)
    skill_path = skill_dir / SKILL_FILENAME
    skill_path.write_text(skill.content, encoding="utf-8")
    LOG(f"Wrote {skill_path} ({skill.tokens} tokens)", level=2)

    result = BuildResult(
        id=manifest.id,
        skillPath=skill_path,
        mainTokens=skill.tokens,
        warnings=list(skill.warnings),
    )

    if manifest.references:
        references_dir = skill_dir / REFERENCES_DIRNAME
        references_dir.mkdir(parents=True, exist_ok=True)
        for reference in manifest.references:
            generated = await referenceFile_generate(reference, repo_root, counter, references, probe)
            path = references_dir / reference.filename
            path.write_text(generated.content, encoding="utf-8")
            LOG(f"Wrote {path} ({generated.tokens} tokens)", level=2)
            result.referencePaths.append(path)
            result.referenceTokens[reference.filename] = generated.tokens
            result.warnings.extend(generated.warnings)

    return result
