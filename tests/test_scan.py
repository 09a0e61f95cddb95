"""Tests for finding section titles in page text."""

import pytest

from guideimg.pipeline.stage_scan import (
    find_close_match,
    find_section_titles_in_page,
    is_list_item,
    looks_like_body_text,
    split_lines,
)

TITLES = ["Entry Hall", "Main Concourse", "Info centre", "Platforms", "The Guardsman"]


def found(page_text, titles=TITLES):
    return [(m.title, m.line_index) for m in find_section_titles_in_page(page_text, titles)]


class TestLineHelpers:
    """Tests for line splitting and classification."""

    def test_split_lines_trims_and_drops_blank_lines(self):
        assert split_lines("  Entry Hall \n\n   \nBody text\n") == ["Entry Hall", "Body text"]

    @pytest.mark.parametrize(
        "line",
        ["• Entry Hall", "- Entry Hall", "* Entry Hall", "– Entry Hall", "o Entry Hall", "1. Entry Hall", "12.Entry Hall"],
    )
    def test_list_items(self, line):
        assert is_list_item(line)

    @pytest.mark.parametrize("line", ["Entry Hall", "outdoor area", "2024 update"])
    def test_not_list_items(self, line):
        assert not is_list_item(line)

    @pytest.mark.parametrize(
        "line",
        [
            "A line that is much too long to be any kind of heading",
            "Quiet corner.",
            "Quiet corner,",
            "Quiet corner;",
            "Lifts are nearby",
            "With handrails",
        ],
    )
    def test_body_text(self, line):
        assert looks_like_body_text(line)

    def test_heading_like_line(self):
        assert not looks_like_body_text("Quiet corner")


class TestFindCloseMatch:
    """Tests for find_close_match."""

    def test_exact_after_normalisation(self):
        assert find_close_match("ENTRY HALL", TITLES) == "Entry Hall"

    def test_line_slightly_longer_than_title(self):
        assert find_close_match("Info centre 1", TITLES) == "Info centre"

    def test_line_slightly_shorter_than_title(self):
        assert find_close_match("Platform", TITLES) == "Platforms"

    def test_length_ratio_outside_band(self):
        """Containment alone is not enough when lengths differ by over 20%."""
        assert find_close_match("Entry Hall Area", TITLES) is None
        assert find_close_match("Main", TITLES) is None

    def test_no_match(self):
        assert find_close_match("Car Park", TITLES) is None


class TestFindSectionTitlesInPage:
    """Tests for find_section_titles_in_page."""

    def test_exact_titles_in_line_order(self):
        page = "Entry Hall\nSound: quiet\nMain Concourse\nLight: bright"
        assert found(page) == [("Entry Hall", 0), ("Main Concourse", 2)]

    def test_trailing_colon_is_ignored(self):
        assert found("Intro\nEntry Hall:\nBody") == [("Entry Hall", 1)]

    def test_bullets_and_numbered_items_are_skipped(self):
        page = "• Entry Hall\n- Main Concourse\n1. Platforms\no Info centre"
        assert found(page) == []

    def test_short_lines_are_skipped(self):
        assert found("OK\nEntry Hall", ["OK", "Entry Hall"]) == [("Entry Hall", 1)]

    def test_exact_match_bypasses_body_text_filters(self):
        """A known title is accepted even if it looks like body text."""
        long_title = "Walkway from newer entrance to main concourse"
        page = f"The Guardsman\nIntro\n{long_title}"

        assert found(page, TITLES + [long_title]) == [("The Guardsman", 0), (long_title, 2)]

    def test_body_text_mentioning_title_is_rejected(self):
        page = "The Entry Hall is busy.\nThis is the main concourse area"
        assert found(page) == []

    def test_close_match_is_accepted(self):
        assert found("Sound levels\nInfo centre 1\nBody") == [("Info centre", 1)]

    def test_first_occurrence_per_title_wins(self):
        page = "Entry Hall\nBody\nEntry Hall\nMain Concourse"
        assert found(page) == [("Entry Hall", 0), ("Main Concourse", 3)]

    def test_empty_page(self):
        assert found("") == []
        assert found("Body\n\n", []) == []

    def test_line_indices_count_non_empty_lines_only(self):
        assert found("\n\nIntro\n\n\nEntry Hall") == [("Entry Hall", 1)]
