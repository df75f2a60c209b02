"""Keyword section scanner for requirement and qualification bullets."""

import re
from typing import List, Sequence

BULLET = re.compile(r"^[-•*]\s*")

REQUIREMENT_START = ("requirement", "must have", "you will need")
REQUIREMENT_STOP = ("nice to have", "preferred", "bonus", "benefit", "what we offer")

QUALIFICATION_START = ("qualification", "nice to have", "preferred")
QUALIFICATION_STOP = ("responsibilit", "what we offer", "benefit")


def scan_section(description: str, start: Sequence[str], stop: Sequence[str]) -> List[str]:
    """
    Collect bullet lines between a start heading and a stop heading.

    A line containing a start keyword opens capture and is itself skipped.
    Only lines beginning with ``-``, ``•`` or ``*`` are captured, with the
    bullet removed. Text without the headings yields an empty list.
    """
    captured = []
    capturing = False

    for line in description.splitlines():
        stripped = line.strip()
        lowered = stripped.lower()

        if any(keyword in lowered for keyword in start):
            capturing = True
            continue

        if capturing and any(keyword in lowered for keyword in stop):
            capturing = False

        if capturing and BULLET.match(stripped):
            item = BULLET.sub("", stripped, count=1)
            if item:
                captured.append(item)

    return captured


def extract_requirements(description: str) -> List[str]:
    return scan_section(description, REQUIREMENT_START, REQUIREMENT_STOP)


def extract_qualifications(description: str) -> List[str]:
    return scan_section(description, QUALIFICATION_START, QUALIFICATION_STOP)
