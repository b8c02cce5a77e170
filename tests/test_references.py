"""
Reference resolver tests
"""

from skilldown.config import appsettings
from skilldown.lib.references import (
    referenceTable_get,
    referenceTable_load,
    referenceTable_parse,
    references_resolve,
)
from skilldown.models.markup import ReferenceEntry, ReferenceTable


REFERENCES_SOURCE = """\
export const substitutions = {
  "fts": "MongoDB Search",
  "atlas": "MongoDB Atlas",
} as const;

export const refs = {
  "pipe.$search": { title: "$search", url: "https://www.mongodb.com/docs/atlas/search" },
  "avs": { "title": "Vector Search", "url": "https://www.mongodb.com/docs/avs" },
} as const;
"""


def table_make() -> ReferenceTable:
    return ReferenceTable(
        substitutions={"fts": "MongoDB Search"},
        refs={"pipe.$search": ReferenceEntry(title="$search", url="https://example.com")},
    )


class TestParse:
    """Reading the data file with patterns"""

    def test_substitutions_parsed(self):
        """Key/value pairs from the substitutions table"""
        table = referenceTable_parse(REFERENCES_SOURCE)
        assert table.substitutions == {"fts": "MongoDB Search", "atlas": "MongoDB Atlas"}

    def test_refs_parsed_quoted_or_not(self):
        """Entry keys may be bare or quoted"""
        table = referenceTable_parse(REFERENCES_SOURCE)
        assert table.refs["pipe.$search"].title == "$search"
        assert table.refs["avs"].url == "https://www.mongodb.com/docs/avs"

    def test_missing_tables_empty(self):
        """Text without tables gives empty tables"""
        table = referenceTable_parse("export const other = 1;")
        assert table.substitutions == {}
        assert table.refs == {}


class TestLoad:
    """Loading and caching the data file"""

    def test_missing_file_warns(self, tmp_path, warnings):
        """An absent file gives empty tables and a diagnostic"""
        table = referenceTable_load([tmp_path / "missing.ts"])
        assert table.substitutions == {}
        assert any("Could not load reference data file" in w for w in warnings)

    def test_first_readable_candidate_wins(self, tmp_path):
        """Later candidates are not read"""
        path = tmp_path / "_references.ts"
        path.write_text(REFERENCES_SOURCE)
        table = referenceTable_load([tmp_path / "missing.ts", path])
        assert table.substitution_get("atlas") == "MongoDB Atlas"

    def test_loaded_once(self, tmp_path, monkeypatch, fresh_reference_cache):
        """The table is cached for the process"""
        path = tmp_path / "_references.ts"
        path.write_text(REFERENCES_SOURCE)
        monkeypatch.setattr(appsettings, "references_file", str(path))

        first = referenceTable_get()
        path.write_text("")
        assert referenceTable_get() is first
        assert first.substitution_get("fts") == "MongoDB Search"


class TestResolve:
    """Replacing <Reference> tags"""

    def test_both_forms_resolved(self):
        """Substitution keys and reference names on one line"""
        line = 'Use <Reference key="fts" type="substitution" /> with <Reference name="pipe.$search" />.'
        assert references_resolve(line, table_make()) == "Use MongoDB Search with $search."

    def test_repeated_occurrences(self):
        """Every occurrence is resolved"""
        tag = '<Reference key="fts" type="substitution" />'
        assert references_resolve(f"{tag} and {tag}", table_make()) == "MongoDB Search and MongoDB Search"

    def test_unresolved_left_in_place(self, warnings):
        """Unknown keys stay verbatim with a diagnostic"""
        line = '<Reference key="nope" type="substitution" /> and <Reference name="missing" />'
        assert references_resolve(line, table_make()) == line
        assert "Unresolved substitution reference: nope" in warnings
        assert "Unresolved name reference: missing" in warnings

    def test_fenced_tags_untouched(self):
        """References inside fences are code"""
        content = '```\n<Reference key="fts" type="substitution" />\n```'
        assert references_resolve(content, table_make()) == content
