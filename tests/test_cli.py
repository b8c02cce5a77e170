"""
CLI pipeline stage tests

The stages are exercised directly on a ProgramState; building is left to
the generator tests.
"""

import pytest

from skilldown.__main__ import env_check, manifests_load, manifests_validate
from skilldown.models import ProgramState, pipeline

MANIFEST = """\
id: demo
title: Demo
description: A demo skill
mainContent:
  type: single
  sources:
    - path: docs/page.md
"""


def repo_make(tmp_path, with_page=True):
    (tmp_path / "manifests").mkdir()
    (tmp_path / "manifests" / "demo.yaml").write_text(MANIFEST)
    if with_page:
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "page.md").write_text("# Page\n")
    return tmp_path


class TestStages:
    """Pipeline stages"""

    def test_manifest_or_all_required(self, tmp_path):
        """Neither --manifest nor --all is an error"""
        state = ProgramState(inputdir=repo_make(tmp_path), outputdir=tmp_path / "out")
        with pytest.raises(SystemExit) as excinfo:
            env_check(state)
        assert excinfo.value.code == 1

    def test_missing_manifest_dir(self, tmp_path):
        state = ProgramState(inputdir=tmp_path, outputdir=tmp_path / "out", all=True)
        with pytest.raises(SystemExit):
            env_check(state)

    def test_validate_only_pipeline(self, tmp_path):
        """Load and validate without writing anything"""
        state = ProgramState(
            inputdir=repo_make(tmp_path), outputdir=tmp_path / "out", manifest="demo", validateOnly=True
        )
        final = pipeline(state, env_check, manifests_load, manifests_validate)
        assert final.envOK
        assert list(final.manifests) == ["demo.yaml"]
        assert final.manifests["demo.yaml"].id == "demo"
        assert not (tmp_path / "out").exists()

    def test_all_finds_manifests(self, tmp_path):
        state = ProgramState(inputdir=repo_make(tmp_path), outputdir=tmp_path / "out", all=True)
        final = pipeline(state, env_check, manifests_load)
        assert [p.name for p in final.manifestPaths] == ["demo.yaml"]

    def test_missing_source_file_exits(self, tmp_path):
        """A manifest naming a missing file stops the pipeline"""
        state = ProgramState(
            inputdir=repo_make(tmp_path, with_page=False), outputdir=tmp_path / "out", manifest="demo"
        )
        with pytest.raises(SystemExit):
            pipeline(state, env_check, manifests_load, manifests_validate)

    def test_unknown_manifest_exits(self, tmp_path):
        state = ProgramState(inputdir=repo_make(tmp_path), outputdir=tmp_path / "out", manifest="nope")
        with pytest.raises(SystemExit):
            pipeline(state, env_check, manifests_load)
