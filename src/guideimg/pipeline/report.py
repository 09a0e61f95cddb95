"""Compare assignment results with known-good image counts.

Used to check the heuristics against audits whose correct assignment has
been established by hand.
"""

from dataclasses import dataclass, field

from guideimg.models import SectionImageMapping


@dataclass
class CountCheck:
    """Expected versus actual image count for one section."""

    section: str
    expected: int
    actual: int
    pages: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.expected == self.actual


def compare_image_counts(
    mappings: list[SectionImageMapping],
    expected: dict[str, int],
) -> list[CountCheck]:
    """Check each mapping's image count; missing expectations count as 0."""
    checks = []
    for mapping in mappings:
        pages = sorted({image.page for image in mapping.images})
        checks.append(
            CountCheck(
                section=mapping.section_title,
                expected=expected.get(mapping.section_title, 0),
                actual=mapping.image_count,
                pages=pages,
            )
        )
    return checks
