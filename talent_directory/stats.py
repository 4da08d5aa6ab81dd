from __future__ import annotations

"""
Dashboard statistics over the recommendation store.
"""

from collections import Counter
from typing import Iterable, List

from .config import (
    STATS_RECENT,
    STATS_TOP_CATEGORIES,
    STATS_TOP_EMPLOYEES,
    STATS_TOP_IMPACTS,
    CategoryCount,
    DashboardStats,
    Employee,
    EmployeeCount,
    ImpactCount,
    Recommendation,
)
from .recommendation_store import sort_by_recency


def top_received(
    recommendations: List[Recommendation],
    employees: List[Employee],
    limit: int = STATS_TOP_EMPLOYEES,
) -> List[EmployeeCount]:
    """Employees ordered by recommendations received; ties keep directory order."""
    received = Counter(r.to_employee_id for r in recommendations)
    counts = [EmployeeCount(employee=e, count=received.get(e.id, 0)) for e in employees]
    counts.sort(key=lambda c: c.count, reverse=True)
    return counts[:limit]


def build_dashboard_stats(
    recommendations: Iterable[Recommendation],
    employees: Iterable[Employee],
) -> DashboardStats:
    recommendations = list(recommendations)
    employees = list(employees)

    # most_common keeps first-seen order for equal counts
    categories = Counter(r.category for r in recommendations).most_common(STATS_TOP_CATEGORIES)
    impacts = Counter(r.impact for r in recommendations).most_common(STATS_TOP_IMPACTS)

    return DashboardStats(
        total_recommendations=len(recommendations),
        total_employees=len(employees),
        top_categories=[CategoryCount(category=c, count=n) for c, n in categories],
        top_impacts=[ImpactCount(impact=i, count=n) for i, n in impacts],
        recent_recommendations=sort_by_recency(recommendations)[:STATS_RECENT],
        top_employees=top_received(recommendations, employees),
    )
