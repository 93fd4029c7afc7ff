"""Tests for labeled snippet extraction."""

import logging
from pathlib import Path

import pytest

from huellas.errors import MissingSnippetLabelError, SnippetFileNotFoundError
from huellas.snippet import extract, language

NESTED = """\
a
// #one
b
// #two
c
// #two
d
// #one
e
"""


@pytest.fixture
def nested(tmp_path: Path) -> Path:
    path = tmp_path / "Nested.scala"
    path.write_text(NESTED)
    return path


class TestExtract:
    """Region selection by label."""

    def test_whole_file_drops_every_marker(self, nested: Path) -> None:
        assert extract(nested) == "a\nb\nc\nd\ne"

    def test_single_label(self, nested: Path) -> None:
        assert extract(nested, ["two"]) == "c"

    def test_other_markers_are_dropped_inside_a_region(self, nested: Path) -> None:
        assert extract(nested, ["one"]) == "b\nc\nd"

    def test_overlapping_labels_form_one_region(self, nested: Path) -> None:
        assert extract(nested, ["one", "two"]) == "b\nc\nd"

    def test_repeated_regions_are_concatenated(self, tmp_path: Path) -> None:
        path = tmp_path / "Repeat.java"
        path.write_text("// #x\nfirst\n// #x\nskipped\n// #x\nsecond\n// #x\n")
        assert extract(path, ["x"]) == "first\nsecond"

    def test_indentation_of_first_region_is_stripped(self, tmp_path: Path) -> None:
        path = tmp_path / "Indented.scala"
        path.write_text(
            "class A {\n"
            "    // #x\n"
            "    def f = 1\n"
            "      .map(g)\n"
            "    // #x\n"
            "}\n"
        )
        assert extract(path, ["x"]) == "def f = 1\n  .map(g)"

    @pytest.mark.parametrize(
        "marker",
        ["// #x", "# #x", "-- #x", "/* #x */", "<!-- #x -->", "; #x", "  //#x  "],
    )
    def test_comment_styles(self, tmp_path: Path, marker: str) -> None:
        path = tmp_path / "snippet.txt"
        path.write_text(f"before\n{marker}\ninside\n{marker}\nafter\n")
        assert extract(path, ["x"]) == "inside"

    def test_hash_inside_code_is_not_a_marker(self, tmp_path: Path) -> None:
        path = tmp_path / "code.py"
        path.write_text("x = '#x'\n# #x\ny = 1\n# #x\n")
        assert extract(path, ["x"]) == "y = 1"
        assert extract(path) == "x = '#x'\ny = 1"

    def test_undecodable_bytes_are_replaced(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"// #x\ncaf\xe9\n// #x\n")
        assert extract(path, ["x"]) == "caf�"


class TestMissing:
    """Missing files and labels."""

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "Missing.scala"
        with pytest.raises(SnippetFileNotFoundError) as exc_info:
            extract(path)

        assert isinstance(exc_info.value, FileNotFoundError)
        assert exc_info.value.path == str(path)

    def test_missing_label_warns(self, nested: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="huellas.snippet"):
            assert extract(nested, ["three"]) == ""

        assert "three" in caplog.text

    def test_missing_label_keeps_found_regions(self, nested: Path) -> None:
        assert extract(nested, ["two", "three"]) == "c"

    def test_missing_label_strict(self, nested: Path) -> None:
        with pytest.raises(MissingSnippetLabelError) as exc_info:
            extract(nested, ["three"], strict=True)

        assert exc_info.value.label == "three"
        assert str(exc_info.value) == f"Label [three] not found in snippet [{nested}]"


class TestLanguage:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Hello.scala", "scala"),
            ("build.sbt", "scala"),
            ("Main.java", "java"),
            ("tool.py", "python"),
            ("app.JS", "javascript"),
            ("run.sh", "bash"),
            ("README.md", "markdown"),
            ("Makefile", "text"),
            ("data.unknown", "text"),
        ],
    )
    def test_language_from_extension(self, name: str, expected: str) -> None:
        assert language(name) == expected
