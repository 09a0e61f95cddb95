"""Section Assignment Stage - Attribute images to guide sections by page.

Two page-based strategies live here:
- ``map_images_by_page_text`` (primary): decides which section owns each
  page from where known titles appear in the page text, carrying the last
  section forward across continuation pages.
- ``map_images_by_page_order`` (last resort): one image per section in
  document order.

The heading-based fallback is in ``stage_headings``.
"""

import logging
from typing import Optional

from guideimg.models import (
    AssignmentRule,
    ExtractedImage,
    PageDecision,
    PageSectionPlan,
    SectionImageMapping,
    SectionMatch,
)

from .buckets import SectionBucketTable
from .stage_scan import find_section_titles_in_page, split_lines

logger = logging.getLogger(__name__)


# Pages whose first heading sits on line 0 or 1 belong to that heading
STARTS_WITH_HEADING_MAX_LINE = 1

# A lone heading in the top 35% of a page follows the continuation content
# where the page's photo usually sits
EARLY_HEADING_POSITION = 0.35

# When the last heading is in the bottom quarter, its section's photo is on
# the next page; this page's images belong to the continuation
LATE_HEADING_POSITION = 0.75


def _relative_position(match: SectionMatch, total_lines: int) -> float:
    return match.line_index / total_lines if total_lines > 0 else 0.0


def decide_page_section(
    page: int,
    sections_on_page: list[SectionMatch],
    total_lines: int,
    continuation: Optional[str],
) -> PageDecision:
    """Decide which section owns a single page's images.

    Args:
        page: Page number.
        sections_on_page: Titles found on the page, in line order.
        total_lines: Number of non-empty lines on the page.
        continuation: Section carried over from earlier pages.

    Returns:
        The decision, with the rule that produced it.
    """
    headings = [match.title for match in sections_on_page]

    if not sections_on_page:
        return PageDecision(
            page=page, rule=AssignmentRule.NO_HEADING, section=continuation, headings=headings
        )

    first = sections_on_page[0]
    last = sections_on_page[-1]

    if first.line_index <= STARTS_WITH_HEADING_MAX_LINE:
        rule, section = AssignmentRule.STARTS_WITH_HEADING, first.title
    elif _relative_position(last, total_lines) >= LATE_HEADING_POSITION:
        rule, section = AssignmentRule.LATE_HEADING, continuation
    elif len(sections_on_page) == 1 and _relative_position(first, total_lines) < EARLY_HEADING_POSITION:
        rule, section = AssignmentRule.SINGLE_EARLY_HEADING, continuation
    elif len(sections_on_page) > 1:
        rule, section = AssignmentRule.MULTIPLE_HEADINGS, first.title
    else:
        rule, section = AssignmentRule.MID_PAGE_HEADING, first.title

    return PageDecision(page=page, rule=rule, section=section, headings=headings)


def plan_page_sections(
    page_texts: dict[int, str],
    section_titles: list[str],
) -> PageSectionPlan:
    """Fold the page-ownership rules over every page in ascending order.

    The continuation section starts empty and becomes the last title found
    on each page that has any; pages without titles leave it unchanged.

    Args:
        page_texts: Raw text per page number.
        section_titles: Known section titles.

    Returns:
        Page ownership, titles per page, the final continuation section
        and the decision trace.
    """
    plan = PageSectionPlan()
    continuation: Optional[str] = None

    for page in sorted(page_texts):
        page_text = page_texts[page] or ""
        sections_on_page = find_section_titles_in_page(page_text, section_titles)

        decision = decide_page_section(
            page,
            sections_on_page,
            len(split_lines(page_text)),
            continuation,
        )
        plan.decisions.append(decision)
        logger.debug(
            "Page %d: %s -> %r (headings: %s)",
            page,
            decision.rule.value,
            decision.section,
            decision.headings,
        )

        if decision.section is not None:
            plan.page_to_section[page] = decision.section
        if sections_on_page:
            plan.page_sections[page] = decision.headings
            continuation = sections_on_page[-1].title

    plan.final_continuation = continuation
    return plan


def map_images_by_page_text(
    images: list[ExtractedImage],
    page_texts: dict[int, str],
    section_titles: list[str],
    plan: Optional[PageSectionPlan] = None,
) -> list[SectionImageMapping]:
    """Assign images to sections using page text and position heuristics.

    Each page's images go to the section chosen by ``plan_page_sections``,
    except on pages with several sections and several images, where the
    k-th image goes to the k-th section found (surplus images to the last).
    Images on pages without an owning section are dropped.

    Args:
        images: Extracted images with page numbers.
        page_texts: Raw text per page number.
        section_titles: Area names from the guide.
        plan: Precomputed plan; built from ``page_texts`` when omitted. Any
            ordinal-distribution decisions are appended to its trace.

    Returns:
        One mapping per section title, in title order.
    """
    table = SectionBucketTable.literal(section_titles)

    if not images or not section_titles:
        return table.to_list()

    if plan is None:
        plan = plan_page_sections(page_texts, section_titles)

    images_by_page: dict[int, list[ExtractedImage]] = {}
    for image in images:
        images_by_page.setdefault(image.page, []).append(image)

    for page, page_images in images_by_page.items():
        sections_here = plan.page_sections.get(page, [])

        if len(sections_here) > 1 and len(page_images) > 1:
            plan.decisions.append(
                PageDecision(
                    page=page,
                    rule=AssignmentRule.ORDINAL_DISTRIBUTION,
                    section=sections_here[0],
                    headings=sections_here,
                )
            )
            for position, image in enumerate(page_images):
                section = sections_here[min(position, len(sections_here) - 1)]
                if not table.add(section, image):
                    logger.warning("Section %r not found in mappings", section)
            continue

        section = plan.page_to_section.get(page)
        for image in page_images:
            if section is None or not table.add(section, image):
                logger.warning("No section found for image on page %d, index %d", page, image.index)

    return table.to_list()


def map_images_by_page_order(
    images: list[ExtractedImage],
    section_titles: list[str],
) -> list[SectionImageMapping]:
    """Distribute images one per section in document order.

    Assumes roughly one image per section, which is wrong whenever sections
    have no image or several; used only when no text is available. Once
    every section has an image the rest go to the last section.
    """
    mappings = SectionBucketTable.literal(section_titles).to_list()

    if not mappings or not images:
        return mappings

    for position, image in enumerate(sorted(images, key=lambda i: (i.page, i.index))):
        mappings[min(position, len(mappings) - 1)].images.append(image)

    return mappings
