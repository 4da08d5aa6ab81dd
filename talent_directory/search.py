from __future__ import annotations

"""
Keyword filtering over a set of decoded employees.

One policy is used by every store backend.  With ``kw`` being the
normalized keyword (see :func:`~talent_directory.normalize.normalize_name`)
an employee matches when any of the following holds:

- ``kw`` is a substring of the normalized name
- the raw keyword (only trimmed) is a substring of the age as a string
- ``kw`` is a substring of any normalized tech stack name

Matching is substring based and results keep the input order; there is
no relevance ranking.  An empty or whitespace-only keyword matches
everything.

Example::

    from talent_directory.search import filter_employees
    filter_employees(employees, "JANE DOE")  # same as "jane doe"
"""

from typing import Iterable, List

from .config import Employee
from .normalize import normalize_name


def employee_matches(employee: Employee, keyword: str, raw_keyword: str) -> bool:
    """``keyword`` is the normalized form, ``raw_keyword`` the trimmed input."""
    if keyword in normalize_name(employee.name):
        return True
    if raw_keyword and raw_keyword in str(employee.age):
        return True
    return any(keyword in normalize_name(t.name) for t in employee.tech_stacks)


def filter_employees(employees: Iterable[Employee], filter_text: str) -> List[Employee]:
    """Return the employees matching ``filter_text`` in their original order."""
    employees = list(employees)
    raw_keyword = (filter_text or "").strip()
    keyword = normalize_name(raw_keyword)
    if not keyword:
        return employees
    return [e for e in employees if employee_matches(e, keyword, raw_keyword)]
