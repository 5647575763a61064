# project_size.py
"""
Free-text project size -> (area, units).

Only forms and request handlers call this, to fill the structured `area` /
`units` fields when the customer typed something like "50 sqm, 1 unit".
The pricing core never parses prose.
"""
import re
from typing import NamedTuple

RE_AREA = re.compile(r"(?P<qty>\d+)\s*(?:sqm|sq\.?\s*m|m2|m²)", re.I)
RE_UNITS = re.compile(r"(?P<qty>\d+)\s*units?\b", re.I)


class ProjectSize(NamedTuple):
    area: int
    units: int


def parse_project_size(text: str) -> ProjectSize:
    """Missing area -> 0, missing units -> 1."""
    text = text or ""
    area_match = RE_AREA.search(text)
    units_match = RE_UNITS.search(text)
    area = int(area_match.group("qty")) if area_match else 0
    units = int(units_match.group("qty")) if units_match else 1
    return ProjectSize(area, units)
