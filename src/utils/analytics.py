"""Aggregate statistics for the admin console.

All functions take the full user list and only count alumni.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from config import DEPARTMENTS, OTHER_DEPARTMENT
from schemas.user import User

TOP_COMPANIES = 10
TOP_SKILLS = 15
RECENT_YEARS = 10


@dataclass
class AdminStats:
    total_alumni: int
    total_departments: int
    mentors: int


def _alumni(users: Sequence[User]) -> List[User]:
    return [u for u in users if u.role == "alumni"]


def admin_stats(users: Sequence[User]) -> AdminStats:
    alumni = _alumni(users)
    return AdminStats(
        total_alumni=len(alumni),
        total_departments=len({u.department for u in alumni}),
        mentors=sum(1 for u in alumni if u.mentorship),
    )


def department_counts(users: Sequence[User]) -> Dict[str, int]:
    """Alumni per department in fixed order; unknown departments go to 'Other'.

    'Other' only appears when at least one alumni falls into it.
    """
    counts = {dept: 0 for dept in DEPARTMENTS}
    for user in _alumni(users):
        dept = user.department or OTHER_DEPARTMENT
        if dept not in DEPARTMENTS:
            dept = OTHER_DEPARTMENT
        counts[dept] = counts.get(dept, 0) + 1
    return counts


def year_trend(users: Sequence[User]) -> List[Tuple[int, int]]:
    """(year, count) pairs, oldest year first."""
    counts = Counter(u.graduation_year for u in _alumni(users))
    return sorted(counts.items())


def recent_years(users: Sequence[User], limit: int = RECENT_YEARS) -> List[Tuple[int, int]]:
    """(year, count) pairs for the latest ``limit`` years, newest first."""
    return sorted(year_trend(users), reverse=True)[:limit]


def top_companies(users: Sequence[User], limit: int = TOP_COMPANIES) -> List[Tuple[str, int]]:
    counts = Counter(u.company for u in _alumni(users) if u.company.strip())
    return counts.most_common(limit)


def top_skills(users: Sequence[User], limit: int = TOP_SKILLS) -> List[Tuple[str, int]]:
    counts = Counter(skill for u in _alumni(users) for skill in u.skill_list())
    return counts.most_common(limit)


def graduation_years(users: Sequence[User]) -> List[int]:
    """Distinct graduation years for the year filter, newest first."""
    return sorted({u.graduation_year for u in _alumni(users)}, reverse=True)
