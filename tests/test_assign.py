"""Tests for page-text and page-order assignment."""

import pytest

from guideimg.models import AssignmentRule, SectionMatch
from guideimg.pipeline.buckets import SectionBucketTable
from guideimg.pipeline.report import compare_image_counts
from guideimg.pipeline.stage_assign import (
    decide_page_section,
    map_images_by_page_order,
    map_images_by_page_text,
    plan_page_sections,
)
from guideimg.pipeline.stage_headings import map_images_to_sections


def counts(mappings):
    return {m.section_title: len(m.images) for m in mappings}


def matches(*pairs):
    return [SectionMatch(title=title, line_index=line) for title, line in pairs]


class TestSectionBucketTable:
    """Tests for the shared bucket table."""

    def test_rows_follow_titles(self):
        table = SectionBucketTable(["Entry Hall", "Platforms"])

        assert len(table) == 2
        assert [m.section_title for m in table.to_list()] == ["Entry Hall", "Platforms"]
        assert [m.normalised_title for m in table.to_list()] == ["entry hall", "platforms"]

    def test_normalised_keys(self, make_image):
        table = SectionBucketTable(["Entry Hall:"])

        assert "entry hall" in table
        assert table.add("entry hall", make_image(1))
        assert not table.add("Entry Hall:", make_image(1))

    def test_literal_keys(self, make_image):
        table = SectionBucketTable.literal(["Entry Hall:"])

        assert table.add("Entry Hall:", make_image(1))
        assert not table.add("entry hall", make_image(1))

    def test_collision_last_write_wins(self, make_image):
        table = SectionBucketTable(["Entry Hall", "entry hall!"])
        table.add("entry hall", make_image(1))

        assert table.collisions == ["entry hall"]
        assert [m.image_count for m in table.to_list()] == [0, 1]


class TestDecidePageSection:
    """Tests for the per-page ownership rules."""

    def test_no_headings_continues(self):
        decision = decide_page_section(3, [], 10, "Entry Hall")

        assert decision.rule == AssignmentRule.NO_HEADING
        assert decision.section == "Entry Hall"

    @pytest.mark.parametrize("line_index", [0, 1])
    def test_starts_with_heading(self, line_index):
        decision = decide_page_section(1, matches(("Platforms", line_index)), 10, "Entry Hall")

        assert decision.rule == AssignmentRule.STARTS_WITH_HEADING
        assert decision.section == "Platforms"

    def test_late_heading_continues(self):
        decision = decide_page_section(2, matches(("Toilets", 2), ("Platforms", 6)), 8, "Entry Hall")

        assert decision.rule == AssignmentRule.LATE_HEADING
        assert decision.section == "Entry Hall"
        assert decision.headings == ["Toilets", "Platforms"]

    def test_late_boundary_is_inclusive(self):
        decision = decide_page_section(2, matches(("Toilets", 3)), 4, "Entry Hall")
        assert decision.rule == AssignmentRule.LATE_HEADING

    def test_single_early_heading_continues(self):
        decision = decide_page_section(2, matches(("Toilets", 2)), 8, "Entry Hall")

        assert decision.rule == AssignmentRule.SINGLE_EARLY_HEADING
        assert decision.section == "Entry Hall"

    def test_multiple_headings_use_first(self):
        decision = decide_page_section(2, matches(("Toilets", 2), ("Platforms", 4)), 8, "Entry Hall")

        assert decision.rule == AssignmentRule.MULTIPLE_HEADINGS
        assert decision.section == "Toilets"

    def test_single_mid_page_heading(self):
        decision = decide_page_section(2, matches(("Toilets", 4)), 10, "Entry Hall")

        assert decision.rule == AssignmentRule.MID_PAGE_HEADING
        assert decision.section == "Toilets"

    def test_early_boundary_is_exclusive(self):
        decision = decide_page_section(2, matches(("Toilets", 7)), 20, "Entry Hall")
        assert decision.rule == AssignmentRule.MID_PAGE_HEADING

    def test_continuation_without_previous_section(self):
        decision = decide_page_section(1, [], 3, None)
        assert decision.section is None


class TestPlanPageSections:
    """Tests for the fold over pages."""

    def test_station_plan(self, station_pages, station_titles):
        plan = plan_page_sections(station_pages, station_titles)

        assert plan.page_to_section[4] == "Info centre"
        assert plan.page_to_section[7] == "Turnstiles"
        assert plan.page_to_section[9] == "South side entrance (from arcade)"
        assert plan.page_sections[3] == ["North Entrance", "Northside concourse"]
        assert 9 not in plan.page_sections
        assert plan.final_continuation == "South side entrance (from arcade)"

        rules = {d.page: d.rule for d in plan.decisions}
        assert rules[1] == AssignmentRule.STARTS_WITH_HEADING
        assert rules[4] == AssignmentRule.MID_PAGE_HEADING
        assert rules[7] == AssignmentRule.MULTIPLE_HEADINGS
        assert rules[9] == AssignmentRule.NO_HEADING

    def test_pages_walk_in_ascending_order(self):
        pages = {2: "• more about the hall", 1: "Entry Hall\nbody"}
        plan = plan_page_sections(pages, ["Entry Hall"])

        assert [d.page for d in plan.decisions] == [1, 2]
        assert plan.page_to_section == {1: "Entry Hall", 2: "Entry Hall"}

    def test_leading_pages_without_headings_have_no_section(self):
        plan = plan_page_sections({1: "Cover page", 2: "Entry Hall"}, ["Entry Hall"])

        assert 1 not in plan.page_to_section
        assert plan.page_to_section[2] == "Entry Hall"

    def test_continuation_is_last_heading_on_page(self):
        pages = {
            1: "Entry Hall\nbody\nbody\nbody\nbody\nbody\nbody\nMain Concourse",
            2: "• continuing",
        }
        plan = plan_page_sections(pages, ["Entry Hall", "Main Concourse"])

        assert plan.page_to_section[2] == "Main Concourse"


class TestMapImagesByPageText:
    """Tests for the primary page-text strategy."""

    def test_station_regression(self, station_images, station_pages, station_titles, station_expected):
        """Every section receives exactly its expected number of images."""
        mappings = map_images_by_page_text(station_images, station_pages, station_titles)

        assert counts(mappings) == station_expected
        assert all(check.ok for check in compare_image_counts(mappings, station_expected))

    def test_turnstiles_photo_not_given_to_later_heading(self, station_images, station_pages, station_titles):
        mappings = {m.section_title: m for m in map_images_by_page_text(station_images, station_pages, station_titles)}

        assert [image.page for image in mappings["Turnstiles"].images] == [7]
        assert mappings["Paid Main concourse"].images == []

    def test_late_heading_sends_images_to_continuation(self, make_image):
        pages = {
            1: "Entry Hall\nbody",
            2: "• more\n• more\n• more\nMain Concourse",
        }
        mappings = map_images_by_page_text([make_image(2)], pages, ["Entry Hall", "Main Concourse"])

        assert counts(mappings) == {"Entry Hall": 1, "Main Concourse": 0}

    def test_ordinal_distribution_on_multi_section_page(self, make_image):
        pages = {1: "Entry Hall\nbody\nMain Concourse\nbody\nPlatforms\nbody"}
        images = [make_image(1, 0), make_image(1, 1)]

        mappings = map_images_by_page_text(images, pages, ["Entry Hall", "Main Concourse", "Platforms"])

        assert counts(mappings) == {"Entry Hall": 1, "Main Concourse": 1, "Platforms": 0}

    def test_ordinal_distribution_surplus_goes_to_last_section(self, make_image):
        pages = {1: "Entry Hall\nbody\nMain Concourse\nbody"}
        images = [make_image(1, i) for i in range(4)]

        mappings = map_images_by_page_text(images, pages, ["Entry Hall", "Main Concourse"])

        assert counts(mappings) == {"Entry Hall": 1, "Main Concourse": 3}

    def test_ordinal_distribution_is_traced(self, make_image):
        pages = {1: "Entry Hall\nbody\nMain Concourse\nbody"}
        plan = plan_page_sections(pages, ["Entry Hall", "Main Concourse"])

        map_images_by_page_text([make_image(1, 0), make_image(1, 1)], pages, ["Entry Hall", "Main Concourse"], plan=plan)

        assert plan.decisions[-1].rule == AssignmentRule.ORDINAL_DISTRIBUTION
        assert plan.decisions[-1].headings == ["Entry Hall", "Main Concourse"]

    def test_single_image_on_multi_section_page_uses_page_owner(self, make_image):
        pages = {1: "Entry Hall\nbody\nMain Concourse\nbody"}

        mappings = map_images_by_page_text([make_image(1)], pages, ["Entry Hall", "Main Concourse"])

        assert counts(mappings) == {"Entry Hall": 1, "Main Concourse": 0}

    def test_orphan_images_are_dropped(self, make_image):
        pages = {1: "Cover page", 2: "Entry Hall"}

        mappings = map_images_by_page_text([make_image(1), make_image(5)], pages, ["Entry Hall"])

        assert counts(mappings) == {"Entry Hall": 0}

    def test_empty_images_or_titles(self, make_image):
        assert counts(map_images_by_page_text([], {1: "Entry Hall"}, ["Entry Hall"])) == {"Entry Hall": 0}
        assert map_images_by_page_text([make_image(1)], {1: "Entry Hall"}, []) == []


class TestMapImagesByPageOrder:
    """Tests for the last-resort page-order strategy."""

    def test_one_image_per_section(self, make_image):
        images = [make_image(1), make_image(2), make_image(3)]

        mappings = map_images_by_page_order(images, ["A", "B", "C"])

        assert [[i.page for i in m.images] for m in mappings] == [[1], [2], [3]]

    def test_extra_images_go_to_last_section(self, make_image):
        images = [make_image(1), make_image(2), make_image(3), make_image(4)]

        mappings = map_images_by_page_order(images, ["A", "B"])

        assert [[i.page for i in m.images] for m in mappings] == [[1], [2, 3, 4]]

    def test_images_are_sorted_by_page_then_index(self, make_image):
        images = [make_image(2, 0), make_image(1, 1), make_image(1, 0)]

        mappings = map_images_by_page_order(images, ["A", "B", "C"])

        assert [(m.images[0].page, m.images[0].index) for m in mappings] == [(1, 0), (1, 1), (2, 0)]

    def test_no_images(self):
        mappings = map_images_by_page_order([], ["A"])

        assert len(mappings) == 1
        assert mappings[0].images == []

    def test_no_sections(self, make_image):
        assert map_images_by_page_order([make_image(1)], []) == []


class TestShapeInvariant:
    """Every strategy returns one mapping per title, in title order."""

    TITLES = ["Platforms", "Entry Hall", "Main Concourse", "Info centre"]

    def test_page_text(self, make_image):
        pages = {1: "Entry Hall", 2: "Main Concourse\nbody\nPlatforms"}
        mappings = map_images_by_page_text([make_image(1), make_image(2)], pages, self.TITLES)
        assert [m.section_title for m in mappings] == self.TITLES

    def test_headings(self, make_image, make_heading):
        mappings = map_images_to_sections(
            [make_image(1)], [make_heading("Main Concourse", 1, 700)], self.TITLES
        )
        assert [m.section_title for m in mappings] == self.TITLES

    def test_page_order(self, make_image):
        mappings = map_images_by_page_order([make_image(i) for i in range(1, 7)], self.TITLES)
        assert [m.section_title for m in mappings] == self.TITLES
