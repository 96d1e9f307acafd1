"""
Eligibility Service

Decides which opportunities a student gets to see. An opportunity is shown
only if all three hold:

1. GPA:        min_gpa unset/0, or the student's GPA (stored as a string)
               parses to a number >= min_gpa. An unparseable GPA never
               meets a nonzero threshold.
2. Department: department unset or "any", or equal to the student's
               department (case-sensitive).
3. Skills:     no skills listed, or at least one in common with the student.

Both arguments are plain dicts as returned by mongo_service.
"""

import math
import re
from typing import Iterable, Iterator, Optional

ANY_DEPARTMENT = "any"

# plain decimal with optional sign and exponent ("1_0" and "inf" do not match)
GPA_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _parse_gpa(value) -> Optional[float]:
    if isinstance(value, str):
        value = value.strip()
        if not GPA_PATTERN.match(value):
            return None
    elif isinstance(value, bool):
        return None
    try:
        gpa = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(gpa) else gpa


def meets_gpa(student: dict, opportunity: dict) -> bool:
    min_gpa = opportunity.get("min_gpa") or 0
    if min_gpa <= 0:
        return True
    gpa = _parse_gpa(student.get("gpa"))
    return gpa is not None and gpa >= min_gpa


def meets_department(student: dict, opportunity: dict) -> bool:
    department = opportunity.get("department")
    if not department or department == ANY_DEPARTMENT:
        return True
    return department == student.get("department")


def meets_skills(student: dict, opportunity: dict) -> bool:
    required = opportunity.get("skills") or []
    if not required:
        return True
    return not set(required).isdisjoint(student.get("skills") or [])


def is_eligible(student: dict, opportunity: dict) -> bool:
    return (
        meets_gpa(student, opportunity)
        and meets_department(student, opportunity)
        and meets_skills(student, opportunity)
    )


def filter_eligible(student: dict, opportunities: Iterable[dict]) -> Iterator[dict]:
    """Lazily yield the opportunities the student is eligible for, in order."""
    return (opp for opp in opportunities if is_eligible(student, opp))
