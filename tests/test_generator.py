"""
Skill generator tests

Links are checked with an injected probe and tokens counted with an
injected encoder, so a build touches only the temporary directory.
"""

import asyncio

from skilldown.lib.generator import referenceLinks_make, skill_build
from skilldown.lib.manifest import manifest_parse
from skilldown.lib.tokens import TokenCounter

MANIFEST = """\
id: search-skill
title: Search Skill
description: Helps search
mainContent:
  type: single
  sources:
    - path: docs/main.mdx
references:
  - filename: guide.md
    title: Guide Title
    linkText: Guide
    description: When tuning
    sources:
      - content: "Guide body with [docs](https://www.mongodb.com/docs/guide/)."
includeReferenceDescriptions: true
"""

MAIN_PAGE = """\
---
title: Main
---
<Note>
  Use indexes.
</Note>
"""


async def probe_ok(url: str) -> bool:
    return True


def build(tmp_path, fake_encoder, empty_references, manifest_text=MANIFEST):
    (tmp_path / "docs").mkdir(exist_ok=True)
    (tmp_path / "docs" / "main.mdx").write_text(MAIN_PAGE)
    manifest = manifest_parse(manifest_text)
    return asyncio.run(
        skill_build(
            manifest,
            tmp_path,
            tmp_path / "out",
            counter=TokenCounter(encoder=fake_encoder),
            references=empty_references,
            probe=probe_ok,
        )
    )


class TestReferenceLinks:
    """Links from SKILL.md to reference files"""

    def test_label_falls_back_to_filename(self):
        manifest = manifest_parse(
            MANIFEST.replace("    title: Guide Title\n    linkText: Guide\n", "")
        )
        assert referenceLinks_make(manifest) == "- [guide.md](references/guide.md) - When tuning"

    def test_descriptions_only_when_enabled(self):
        manifest = manifest_parse(MANIFEST.replace("includeReferenceDescriptions: true", ""))
        assert referenceLinks_make(manifest) == "- [Guide](references/guide.md)"


class TestBuild:
    """Complete skill builds"""

    def test_skill_file_written(self, tmp_path, fake_encoder, empty_references):
        """SKILL.md gets frontmatter, title, cleaned content and links"""
        result = build(tmp_path, fake_encoder, empty_references)
        skill = (tmp_path / "out" / "search-skill" / "SKILL.md").read_text()
        assert result.skillPath == tmp_path / "out" / "search-skill" / "SKILL.md"
        assert skill == (
            "---\nname: search-skill\ndescription: Helps search\n---\n\n"
            "# Search Skill\n\n"
            "Use indexes.\n\n"
            "- [Guide](references/guide.md) - When tuning"
        )
        assert result.mainTokens == len(skill.split())

    def test_reference_file_written(self, tmp_path, fake_encoder, empty_references):
        """Reference files get their title and rewritten links"""
        result = build(tmp_path, fake_encoder, empty_references)
        path = tmp_path / "out" / "search-skill" / "references" / "guide.md"
        assert result.referencePaths == [path]
        assert path.read_text() == (
            "# Guide Title\n\nGuide body with [docs](https://www.mongodb.com/docs/guide.md)."
        )
        assert result.referenceTokens["guide.md"] == len(path.read_text().split())

    def test_budget_warning_collected(self, tmp_path, fake_encoder, empty_references):
        """An exceeded budget is reported, output is still written"""
        result = build(tmp_path, fake_encoder, empty_references, MANIFEST + "maxTokens: 1\n")
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("Main SKILL.md: Token count (")
        assert (tmp_path / "out" / "search-skill" / "SKILL.md").exists()

    def test_no_warnings_within_budget(self, tmp_path, fake_encoder, empty_references):
        result = build(tmp_path, fake_encoder, empty_references)
        assert result.warnings == []
