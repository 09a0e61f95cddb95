"""Pytest configuration and fixtures."""

import pytest

from guideimg.models import Area, DetectedHeading, ExtractedImage, Guide, PdfContent
from guideimg.text import normalise_text


# Section titles as returned by the LLM for a railway station audit
STATION_TITLES = [
    "Entry/Exit Festival Drive",
    "Walkway from newer entrance to main concourse",
    "North Entrance",
    "Northside concourse",
    "Info centre",
    "The Guardsman",
    "Main concourse",
    "Toilet area",
    "Turnstiles",
    "Paid Main concourse",
    "Platforms",
    "South side entrance (from arcade)",
]

# Hand-checked image counts for the audit
STATION_EXPECTED = {
    "Entry/Exit Festival Drive": 1,
    "Walkway from newer entrance to main concourse": 1,
    "North Entrance": 1,
    "Northside concourse": 0,
    "Info centre": 1,
    "The Guardsman": 0,
    "Main concourse": 1,
    "Toilet area": 0,
    "Turnstiles": 1,
    "Paid Main concourse": 0,
    "Platforms": 1,
    "South side entrance (from arcade)": 0,
}

STATION_PAGES = {
    1: "\n".join([
        "Sensory Audit Report",
        "Entry/Exit Festival Drive",
        "Sound: moderate traffic noise from the road.",
        "Light: bright natural daylight.",
    ]),
    2: "\n".join([
        "Walkway from newer entrance to main concourse",
        "Crowds: busy during peak hours.",
        "Surfaces are smooth and level.",
    ]),
    3: "\n".join([
        "North Entrance",
        "Sound: announcements are audible.",
        "Lifts are available near the gates.",
        "Northside concourse",
        "Smell: food outlets nearby",
        "Touch: handrails throughout",
    ]),
    4: "\n".join([
        "• Seating available along the walls",
        "• Busy during events",
        "Info centre",
        "Staff can help with directions.",
        "Sound: quiet",
    ]),
    5: "\n".join([
        "The Guardsman",
        "Sound: loud music from the bar.",
        "Smell: food and drink.",
        "Crowds: high on match days.",
    ]),
    6: "\n".join([
        "Main concourse",
        "Light: fluorescent overhead lighting",
        "Sound: echoes under the roof.",
        "Crowds: very busy before events.",
        "Toilet area",
        "Accessible toilets are on the left.",
    ]),
    # Continuation of the toilets, then two headings: the photo shows the turnstiles
    7: "\n".join([
        "• Baby change facilities",
        "• Hand dryers can be loud",
        "Turnstiles",
        "Sound: beeping when tickets scan",
        "Paid Main concourse",
        "Crowds: queues form quickly",
        "Light: bright screens",
        "Movement: people walking fast",
    ]),
    8: "\n".join([
        "Platforms",
        "Sound: train horns and announcements",
        "Movement: trains arriving",
        "South side entrance (from arcade)",
        "Light: dim under the arcade",
    ]),
    9: "\n".join([
        "• Exit via the arcade stairs",
        "• Lift to street level",
    ]),
}

STATION_IMAGE_PAGES = [1, 2, 3, 4, 6, 7, 8]


def create_image(page: int, index: int = 0) -> ExtractedImage:
    return ExtractedImage(
        page=page,
        index=index,
        width=100,
        height=100,
        name=f"img-{page}-{index}",
        data=b"fake",
    )


def create_heading(text: str, page: int, y: float) -> DetectedHeading:
    return DetectedHeading(
        text=text,
        page=page,
        y=y,
        font_size=16,
        normalised_text=normalise_text(text),
    )


@pytest.fixture
def make_image():
    """Factory for extracted images."""
    return create_image


@pytest.fixture
def make_heading():
    """Factory for detected headings."""
    return create_heading


@pytest.fixture
def station_titles():
    return list(STATION_TITLES)


@pytest.fixture
def station_expected():
    return dict(STATION_EXPECTED)


@pytest.fixture
def station_pages():
    return dict(STATION_PAGES)


@pytest.fixture
def station_images():
    return [create_image(page) for page in STATION_IMAGE_PAGES]


@pytest.fixture
def station_content(station_pages, station_images):
    """Extracted content of the station audit."""
    return PdfContent(
        images=station_images,
        page_texts=station_pages,
        page_count=len(station_pages),
    )


@pytest.fixture
def station_guide():
    """Guide whose areas are the station sections."""
    return Guide(
        areas=[
            Area(id=f"area-{i}", name=title, order=i)
            for i, title in enumerate(STATION_TITLES)
        ]
    )


@pytest.fixture
def output_dir(tmp_path):
    """Create a temporary output directory."""
    out_dir = tmp_path / "output"
    out_dir.mkdir()
    return out_dir
