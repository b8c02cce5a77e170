"""
Structural converter tests

Headings, examples, tabs, labeled input/output blocks and numbered steps.
"""

from skilldown.lib.converters import (
    examples_convert,
    headings_convert,
    ioblocks_convert,
    procedures_convert,
    tabTitle_fromId,
    tabs_convert,
    title_normalize,
)


class TestHeadings:
    """<Heading> tags become '#' headings"""

    def test_subsection_under_level_two(self):
        """The heading goes one level below the current one"""
        content = "<Heading>\n  Subsection\n</Heading>\n\nBody"
        assert headings_convert(content, level=2) == "### Subsection\n\nBody"

    def test_adjacent_headings_cascade(self):
        """A sibling heading nests under the one just emitted"""
        content = "## Setup\n<Heading>\nFirst\n</Heading>\n<Heading>\nSecond\n</Heading>"
        assert headings_convert(content) == "## Setup\n### First\n#### Second"

    def test_capped_at_six(self):
        """Never deeper than '######'"""
        content = "###### Deep\n<Heading>\nDeeper\n</Heading>"
        assert headings_convert(content) == "###### Deep\n###### Deeper"

    def test_multiline_title_punctuation(self):
        """No space is inserted before leading punctuation"""
        content = "<Heading>\n  Create a file named\n  `app.js`\n  .\n</Heading>"
        assert headings_convert(content) == "## Create a file named `app.js`."

    def test_same_line_heading(self):
        """'<Heading>text</Heading>' on one line"""
        assert headings_convert("<Heading>Quick Start</Heading>") == "## Quick Start"

    def test_fenced_tag_untouched(self):
        """Fenced heading tags are code"""
        content = "```\n<Heading>\n  x\n</Heading>\n```"
        assert headings_convert(content) == content

    def test_unclosed_heading_kept(self):
        """An unclosed tag gives its lines back"""
        assert headings_convert("<Heading>\n  Title") == "<Heading>\n  Title"


class TestExamples:
    """<Example> blocks become an Example heading"""

    def test_example_heading_and_dedent(self):
        """Heading one level down, body dedented by 2"""
        content = "## Usage\n<Example>\n  Run it.\n  ```sh\n  run\n  ```\n</Example>"
        assert examples_convert(content) == "## Usage\n### Example\nRun it.\n```sh\nrun\n```"

    def test_fence_gets_body_dedent_only(self):
        """Code keeps its own indentation beyond the body's 2 spaces"""
        content = "<Example>\n  ```py\n  if x:\n      run()\n  ```\n</Example>"
        assert examples_convert(content) == "## Example\n```py\nif x:\n    run()\n```"

    def test_follows_latest_heading(self):
        """The Example heading nests under the heading just before it"""
        content = "## A\n#### B\n<Example>\n  Body\n</Example>"
        assert examples_convert(content) == "## A\n#### B\n##### Example\nBody"

    def test_capped_at_six(self):
        content = "###### Deep\n<Example>\n  Body\n</Example>"
        assert examples_convert(content) == "###### Deep\n###### Example\nBody"


class TestTabs:
    """<Tabs>/<Tab> become subsections"""

    def test_tab_title_from_id(self):
        """Hyphenated ids are title-cased"""
        assert tabTitle_fromId("create-one") == "Create One"

    def test_tabs_converted(self):
        """One heading per tab, explicit titles win, bodies dedented by 4"""
        content = (
            "## Install\n"
            "<Tabs>\n"
            '  <Tab tabid="create-one">\n'
            "    Body one\n"
            "  </Tab>\n"
            '  <Tab tabid="x" title="Custom Title">\n'
            "    Body two\n"
            "  </Tab>\n"
            "</Tabs>"
        )
        expected = "## Install\n### Create One\nBody one\n### Custom Title\nBody two"
        assert tabs_convert(content) == expected

    def test_fence_in_tab_gets_body_dedent_only(self):
        """Fences in a tab lose the same 4 spaces as its prose"""
        content = (
            "<Tabs>\n"
            '  <Tab tabid="shell">\n'
            "    Run:\n"
            "    ```sh\n"
            "    for f in *; do\n"
            "        echo $f\n"
            "    done\n"
            "    ```\n"
            "  </Tab>\n"
            "</Tabs>"
        )
        expected = "## Shell\nRun:\n```sh\nfor f in *; do\n    echo $f\ndone\n```"
        assert tabs_convert(content) == expected


class TestIoBlocks:
    """<IoCodeBlock> exchanges become labeled blocks"""

    def test_input_output_labels(self):
        """Input and Output labels, fences dedented with their block"""
        content = (
            "<IoCodeBlock>\n"
            "  <Input>\n"
            "    ```js\n"
            "    db.find()\n"
            "    ```\n"
            "  </Input>\n"
            "  <Output>\n"
            "    ```\n"
            "    []\n"
            "    ```\n"
            "  </Output>\n"
            "</IoCodeBlock>"
        )
        expected = "**Input:**\n```js\ndb.find()\n```\n\n**Output:**\n```\n[]\n```"
        assert ioblocks_convert(content) == expected

    def test_exchange_in_list_item_keeps_item_indent(self):
        """Content loses exactly 4 spaces, so it stays inside the list"""
        content = (
            "1. Run:\n"
            "\n"
            "   <IoCodeBlock>\n"
            "     <Input>\n"
            "       ```js\n"
            "       db.find()\n"
            "       ```\n"
            "     </Input>\n"
            "   </IoCodeBlock>"
        )
        expected = "1. Run:\n\n**Input:**\n   ```js\n   db.find()\n   ```"
        assert ioblocks_convert(content) == expected

    def test_input_outside_block_untouched(self):
        """<Input> only means something inside an exchange"""
        assert ioblocks_convert("<Input>") == "<Input>"


class TestSteps:
    """<Procedure>/<Step> become numbered steps"""

    def test_title_ends_at_section(self):
        """The nested Section ends the title and is kept for the Section pass"""
        content = (
            "<Procedure>\n"
            "  <Step>\n"
            "    Create the index.\n"
            "    <Section>\n"
            "      Run the command.\n"
            "    </Section>\n"
            "  </Step>\n"
            "  <Step>\n"
            "    Query the data.\n"
            "  </Step>\n"
            "</Procedure>"
        )
        lines = procedures_convert(content).split("\n")
        assert lines[:5] == [
            "**Step 1:** Create the index.",
            "",
            "<Section>",
            "  Run the command.",
            "</Section>",
        ]
        assert "**Step 2:** Query the data." in lines

    def test_multiline_title_joined(self):
        """Title lines are joined with the punctuation rule"""
        content = "<Procedure>\n  <Step>\n    Create a file named\n    `app.js`\n    .\n  </Step>\n</Procedure>"
        assert procedures_convert(content).startswith("**Step 1:** Create a file named `app.js`.")

    def test_numbering_restarts_per_procedure(self):
        """Each procedure starts at Step 1"""
        procedure = "<Procedure>\n  <Step>\n    One\n  </Step>\n  <Step>\n    Two\n  </Step>\n</Procedure>"
        result = procedures_convert(procedure + "\n\nBetween\n\n" + procedure)
        assert result.count("**Step 1:**") == 2
        assert result.count("**Step 2:**") == 2
        assert "**Step 3:**" not in result

    def test_duplicate_heading_dropped(self):
        """A heading repeating the step title is dropped"""
        content = (
            "<Procedure>\n"
            "  <Step>\n"
            "    Define the index.\n"
            "\n"
            "    ## Define the index\n"
            "\n"
            "    Body text.\n"
            "  </Step>\n"
            "</Procedure>"
        )
        result = procedures_convert(content)
        assert "## Define the index" not in result
        assert result.count("Define the index") == 1
        assert "Body text." in result

    def test_duplicate_check_is_case_sensitive(self):
        """A heading differing in case is kept"""
        content = (
            "<Procedure>\n"
            "  <Step>\n"
            "    Define the index.\n"
            "    ## define the index\n"
            "  </Step>\n"
            "</Procedure>"
        )
        assert "## define the index" in procedures_convert(content)

    def test_duplicate_heading_tag_dropped(self):
        """A repeating <Heading> tag is dropped as well"""
        content = (
            "<Procedure>\n"
            "  <Step>\n"
            "    Connect to Atlas\n"
            "    <Heading>\n"
            "      Connect to Atlas\n"
            "    </Heading>\n"
            "    Body\n"
            "  </Step>\n"
            "</Procedure>"
        )
        result = procedures_convert(content)
        assert "<Heading>" not in result
        assert result.count("Connect to Atlas") == 1

    def test_fence_ends_title(self):
        """A fence is body, never title"""
        content = (
            "<Procedure>\n"
            "  <Step>\n"
            "    Install.\n"
            "    ```sh\n"
            "    npm install\n"
            "    ```\n"
            "  </Step>\n"
            "</Procedure>"
        )
        assert procedures_convert(content).split("\n")[:5] == [
            "**Step 1:** Install.",
            "",
            "```sh",
            "npm install",
            "```",
        ]

    def test_title_closed_by_step_end(self):
        """A step with no body still gets the blank line after its title"""
        content = "<Procedure>\n  <Step>\n    Only a title.\n  </Step>\n</Procedure>"
        assert procedures_convert(content) == "**Step 1:** Only a title.\n"

    def test_outside_procedure_untouched(self):
        """Text with no procedure passes through"""
        assert procedures_convert("plain\ntext") == "plain\ntext"

    def test_title_normalize(self):
        """Whitespace and trailing punctuation are ignored, case is not"""
        assert title_normalize("Define  the index .") == "Define the index"
        assert title_normalize("Define") != title_normalize("define")
