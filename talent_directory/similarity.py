from __future__ import annotations

"""
"Similar employees" ranking.

The score is a weighted distance, so smaller means more similar:

    0.3 * |age difference|
  + 0.2 * (1 if departments differ else 0)
  + 0.2 * (1 if positions differ else 0)
  + 0.3 * tech stack term

The tech stack term adds the absolute level differences of the tech
names both employees have, plus one for every tech name only one of
them has.  A tech name listed more than once on one employee counts
once, with the level of its first entry.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

import numpy as np
from loguru import logger

from .config import (
    AGE_WEIGHT,
    DEPARTMENT_WEIGHT,
    POSITION_WEIGHT,
    SIMILAR_TOP_N,
    TECH_STACK_WEIGHT,
    Employee,
)


@dataclass
class ScoredEmployee:
    employee: Employee
    score: float


def _levels_by_name(employee: Employee) -> Dict[str, int]:
    # a repeated tech name counts once, with its first level
    levels: Dict[str, int] = {}
    for skill in employee.tech_stacks:
        levels.setdefault(skill.name, skill.level)
    return levels


def tech_stack_distance(a: Employee, b: Employee) -> float:
    levels_a = _levels_by_name(a)
    levels_b = _levels_by_name(b)
    shared = levels_a.keys() & levels_b.keys()
    total_level_diff = sum(abs(levels_a[name] - levels_b[name]) for name in shared)
    unmatched = len(levels_a.keys() ^ levels_b.keys())
    return float(total_level_diff + unmatched)


def similarity_score(a: Employee, b: Employee) -> float:
    age_diff = abs(a.age - b.age)
    department_diff = 0 if a.department == b.department else 1
    position_diff = 0 if a.position == b.position else 1
    return (
        age_diff * AGE_WEIGHT
        + department_diff * DEPARTMENT_WEIGHT
        + position_diff * POSITION_WEIGHT
        + tech_stack_distance(a, b) * TECH_STACK_WEIGHT
    )


def rank_similar(
    current: Employee,
    employees: Iterable[Employee],
    top_n: int = SIMILAR_TOP_N,
) -> List[ScoredEmployee]:
    """Rank everyone except ``current`` by ascending score, keeping the top ``top_n``.

    Equal scores keep the input order.
    """
    others = [e for e in employees if e.id != current.id]
    if not others or top_n <= 0:
        return []
    scores = np.array([similarity_score(current, e) for e in others], dtype="float64")
    order = np.argsort(scores, kind="stable")[:top_n]
    ranked = [ScoredEmployee(employee=others[i], score=float(scores[i])) for i in order]
    logger.debug("Ranked {} similar employees for {}", len(ranked), current.id)
    return ranked
