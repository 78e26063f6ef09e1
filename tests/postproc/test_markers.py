"""Tests for onboardgen.postproc.markers."""

from __future__ import annotations

from onboardgen.postproc.markers import ResponseParser
from onboardgen.prompting.constants import DOCUMENT_NAMES


def test_four_well_formed_blocks() -> None:
    text = "\n".join(
        f"[START_{name}]\n  body of {name}  \n[END_{name}]" for name in DOCUMENT_NAMES
    )

    documents = ResponseParser().parse(text)

    assert documents == {name: f"body of {name}" for name in DOCUMENT_NAMES}


def test_blocks_in_any_order_with_surrounding_noise() -> None:
    text = (
        "Sure! Here you go.\n"
        "[START_SETUP.md]setup[END_SETUP.md]\n"
        "chatter\n"
        "[START_README.md]\n# Title\n[END_README.md]\n"
        "trailing"
    )

    documents = ResponseParser().parse(text)

    assert list(documents) == ["SETUP.md", "README.md"]
    assert documents["README.md"] == "# Title"


def test_mismatched_names_yield_nothing() -> None:
    assert ResponseParser().parse("[START_A]content[END_B]") == {}


def test_empty_and_marker_free_input() -> None:
    parser = ResponseParser()

    assert parser.parse("") == {}
    assert parser.parse("no markers at all") == {}


def test_unterminated_block_does_not_swallow_later_blocks() -> None:
    text = "[START_README.md]never closed [START_SETUP.md]ok[END_SETUP.md]"

    assert ResponseParser().parse(text) == {"SETUP.md": "ok"}


def test_first_matching_end_marker_closes_block() -> None:
    text = "[START_A]one[END_A]two[END_A]"

    assert ResponseParser().parse(text) == {"A": "one"}


def test_nested_blocks_are_not_overlapping_matches() -> None:
    text = "[START_A]outer [START_B]inner[END_B] tail[END_A]"

    assert ResponseParser().parse(text) == {"A": "outer [START_B]inner[END_B] tail"}


def test_malformed_start_marker_is_skipped() -> None:
    text = "[START_bad name]x[END_bad name] [START_]y[END_] [START_ok]z[END_ok]"

    assert ResponseParser().parse(text) == {"ok": "z"}


def test_allowed_filter_and_reserved_names() -> None:
    text = "[START_..]up[END_..][START_notes.txt]n[END_notes.txt][START_README.md]r[END_README.md]"

    assert ResponseParser().parse(text) == {"notes.txt": "n", "README.md": "r"}
    assert ResponseParser(allowed=DOCUMENT_NAMES).parse(text) == {"README.md": "r"}


def test_duplicate_names_keep_last_block() -> None:
    text = "[START_README.md]old[END_README.md][START_README.md]new[END_README.md]"

    assert ResponseParser().parse(text) == {"README.md": "new"}
