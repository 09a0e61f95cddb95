"""Page Text Scanning Stage - Find known section titles in plain page text.

Primary path for image assignment; needs no font data. A line counts as a
section heading when it matches a known title and does not look like a list
item or body text:
- exact normalised matches are always accepted
- other lines must be short, unpunctuated and free of common function words,
  and then match a title of nearly the same length
"""

import re
from typing import Optional

from guideimg.models import SectionMatch
from guideimg.text import normalise_text


BULLET_PREFIXES = ("•", "-", "*", "–", "o ")
NUMBERED_ITEM = re.compile(r"^\d+\.")

# Lines shorter than this (after removing a trailing colon) are never headings
MIN_HEADING_CHARS = 3

# Longest line accepted as a heading without an exact match
MAX_HEADING_CHARS = 40

# Sentence punctuation that marks body text
BODY_TEXT_ENDINGS = (".", ",", ";")

# Function words rarely found in area names but common in prose
BODY_TEXT_WORDS = re.compile(
    r"\b(the|was|were|is|are|that|which|with|this|and|but|for|have|has)\b",
    re.IGNORECASE,
)

# A close match must be within 20% of the title's length either way
CLOSE_MATCH_MIN_RATIO = 0.8
CLOSE_MATCH_MAX_RATIO = 1.2


def split_lines(page_text: str) -> list[str]:
    """Trimmed, non-empty lines of a page."""
    lines = (line.strip() for line in page_text.split("\n"))
    return [line for line in lines if line]


def is_list_item(line: str) -> bool:
    return line.startswith(BULLET_PREFIXES) or bool(NUMBERED_ITEM.match(line))


def looks_like_body_text(line: str) -> bool:
    """Heading-likeness filters applied to lines without an exact match."""
    if len(line) > MAX_HEADING_CHARS:
        return True
    if line.endswith(BODY_TEXT_ENDINGS):
        return True
    return bool(BODY_TEXT_WORDS.search(line))


def find_close_match(line: str, section_titles: list[str]) -> Optional[str]:
    """Find a title that is the line, or very nearly the line.

    Args:
        line: Candidate heading line.
        section_titles: Known section titles.

    Returns:
        The first matching title, or None.
    """
    norm_line = normalise_text(line)

    for title in section_titles:
        if normalise_text(title) == norm_line:
            return title

    for title in section_titles:
        norm_title = normalise_text(title)
        if not norm_title:
            continue

        length_ratio = len(norm_line) / len(norm_title)
        if length_ratio < CLOSE_MATCH_MIN_RATIO or length_ratio > CLOSE_MATCH_MAX_RATIO:
            continue

        if norm_title in norm_line or norm_line in norm_title:
            return title

    return None


def find_section_titles_in_page(
    page_text: str,
    section_titles: list[str],
) -> list[SectionMatch]:
    """Find section titles appearing as headings in a page's text.

    Args:
        page_text: Raw text of one page.
        section_titles: Known section titles.

    Returns:
        Matches in line order; each title appears at most once.
    """
    lines = split_lines(page_text)
    results: list[SectionMatch] = []
    found: set[str] = set()

    # Later titles win when two normalise identically
    normalised_titles = {normalise_text(title): title for title in section_titles}

    for line_index, line in enumerate(lines):
        if is_list_item(line):
            continue

        cleaned = line[:-1].strip() if line.endswith(":") else line
        if len(cleaned) < MIN_HEADING_CHARS:
            continue

        exact = normalised_titles.get(normalise_text(cleaned))
        if exact is not None:
            if exact not in found:
                results.append(SectionMatch(title=exact, line_index=line_index))
                found.add(exact)
            continue

        if looks_like_body_text(line):
            continue

        match = find_close_match(cleaned, section_titles)
        if match is not None and match not in found:
            results.append(SectionMatch(title=match, line_index=line_index))
            found.add(match)

    return results
