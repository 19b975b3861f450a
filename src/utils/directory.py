"""Alumni directory helpers: network cards, table filtering and pagination."""

import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Sequence, TypeVar

from config import ALUMNI_PAGE_SIZE, NETWORK_PAGE_SIZE
from schemas.user import User

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a listing. ``start``/``end`` are 1-based and inclusive."""

    items: List[T] = field(default_factory=list)
    page: int = 1
    pages: int = 1
    total: int = 0
    start: int = 0
    end: int = 0


@dataclass
class DashboardStats:
    total_alumni: int
    department_alumni: int
    mentors: int


def alumni_network(
    users: Sequence[User],
    current_user: Optional[User],
    limit: int = NETWORK_PAGE_SIZE,
) -> List[User]:
    """Alumni shown on the dashboard: everyone but the viewer, newest class first."""
    current_id = current_user.id if current_user else None
    alumni = [u for u in users if u.role == "alumni" and u.id != current_id]
    alumni.sort(key=lambda u: u.graduation_year, reverse=True)
    return alumni[:limit]


def filter_alumni(
    users: Sequence[User],
    search: str = "",
    department: Optional[str] = None,
    year: Optional[int] = None,
) -> List[User]:
    """Filter alumni for the admin table.

    Args:
        users: All users; admins are dropped.
        search: Case-insensitive text matched against name, email, company,
            position and skills.
        department: Exact department, or None for all.
        year: Graduation year, or None for all.
    """
    result = [u for u in users if u.role == "alumni"]
    if department:
        result = [u for u in result if u.department == department]
    if year:
        result = [u for u in result if u.graduation_year == int(year)]
    term = (search or "").strip().lower()
    if term:
        result = [
            u
            for u in result
            if any(
                term in value.lower()
                for value in (u.name, u.email, u.company, u.position, u.skills)
                if value
            )
        ]
    return result


def sort_by_name(users: Sequence[User]) -> List[User]:
    return sorted(users, key=lambda u: u.name.casefold())


def paginate(items: Sequence[T], page: int = 1, per_page: int = ALUMNI_PAGE_SIZE) -> Page[T]:
    """Slice ``items`` into a fixed-size page, clamping ``page`` into range."""
    total = len(items)
    pages = max(1, math.ceil(total / per_page))
    page = min(max(1, page), pages)
    offset = (page - 1) * per_page
    chunk = list(items[offset:offset + per_page])
    return Page(
        items=chunk,
        page=page,
        pages=pages,
        total=total,
        start=offset + 1 if chunk else 0,
        end=offset + len(chunk),
    )


def dashboard_stats(users: Sequence[User], current_user: User) -> DashboardStats:
    """Counts shown on the alumni dashboard."""
    alumni = [u for u in users if u.role == "alumni"]
    return DashboardStats(
        total_alumni=len(alumni),
        department_alumni=sum(1 for u in alumni if u.department == current_user.department),
        mentors=sum(1 for u in alumni if u.mentorship),
    )
