from __future__ import annotations

"""
The talent directory facade consumed by the HTTP layer and the CLI.

:class:`TalentDirectory` pairs an employee store with a recommendation
store and exposes the operations callers need.  :func:`build_directory`
wires the backends chosen in :mod:`talent_directory.config`.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from loguru import logger

from .config import (
    AWS_REGION,
    EMPLOYEE_BACKEND,
    EMPLOYEE_TABLE_NAME,
    EMPLOYEES_CSV_PATH,
    SAMPLE_RECOMMENDATIONS_PATH,
    SEED_SAMPLE_RECOMMENDATIONS,
    SIMILAR_TOP_N,
    Category,
    DashboardStats,
    Employee,
    Impact,
    Recommendation,
    Role,
)
from .employee_store import (
    DynamoDBEmployeeTable,
    EmployeeDatabase,
    InMemoryEmployeeDatabase,
    KeyValueEmployeeDatabase,
)
from .recommendation_store import (
    CreatePayload,
    InMemoryRecommendationDatabase,
    RecommendationDatabase,
    UpdatePayload,
    load_sample_recommendations,
)
from .similarity import ScoredEmployee, rank_similar
from .stats import build_dashboard_stats


class TalentDirectory:
    def __init__(self, employees: EmployeeDatabase, recommendations: RecommendationDatabase):
        self.employees = employees
        self.recommendations = recommendations

    # ---- employees ---------------------------------------------------------

    def list_employees(self, filter_text: str = "") -> List[Employee]:
        return self.employees.get_employees(filter_text)

    def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get_employee(employee_id)

    def similar_employees(self, employee_id: str, top_n: int = SIMILAR_TOP_N) -> Optional[List[ScoredEmployee]]:
        """``None`` when the reference employee does not exist."""
        current = self.get_employee(employee_id)
        if current is None:
            return None
        return rank_similar(current, self.list_employees(""), top_n=top_n)

    # ---- recommendations ---------------------------------------------------

    def list_recommendations_for(self, employee_id: str, role: Role = "to") -> List[Recommendation]:
        return self.recommendations.get_recommendations_by_role(employee_id, role)

    def create_recommendation(self, payload: CreatePayload) -> Recommendation:
        return self.recommendations.create_recommendation(payload)

    def get_recommendation(self, recommendation_id: str) -> Optional[Recommendation]:
        return self.recommendations.get_recommendation(recommendation_id)

    def update_recommendation(self, recommendation_id: str, updates: UpdatePayload) -> Optional[Recommendation]:
        return self.recommendations.update_recommendation(recommendation_id, updates)

    def delete_recommendation(self, recommendation_id: str) -> bool:
        return self.recommendations.delete_recommendation(recommendation_id)

    def list_by_category(self, category: Category) -> List[Recommendation]:
        return self.recommendations.get_recommendations_by_category(category)

    def list_by_impact(self, impact: Impact) -> List[Recommendation]:
        return self.recommendations.get_recommendations_by_impact(impact)

    def search_by_tags(self, tags: Iterable[str]) -> List[Recommendation]:
        return self.recommendations.search_recommendations_by_tags(tags)

    def list_all(self) -> List[Recommendation]:
        return self.recommendations.get_all_recommendations()

    def filter_recommendations(
        self,
        category: Optional[Category] = None,
        impact: Optional[Impact] = None,
        tags: Optional[List[str]] = None,
    ) -> List[Recommendation]:
        """Combine the category, impact and tag filters (all given filters must hold)."""
        if category is not None:
            results = self.list_by_category(category)
        elif impact is not None:
            results = self.list_by_impact(impact)
        elif tags:
            results = self.search_by_tags(tags)
        else:
            return self.list_all()
        if impact is not None:
            results = [r for r in results if r.impact == impact]
        if tags:
            wanted = set(tags)
            results = [r for r in results if wanted.intersection(r.tags)]
        return results

    def dashboard_stats(self) -> DashboardStats:
        return build_dashboard_stats(self.list_all(), self.list_employees(""))


def build_employee_database(
    backend: str = EMPLOYEE_BACKEND,
    csv_path: Path = EMPLOYEES_CSV_PATH,
    table_name: str = EMPLOYEE_TABLE_NAME,
) -> EmployeeDatabase:
    if backend == "dynamodb":
        logger.info("Using DynamoDB employee table {} ({})", table_name, AWS_REGION)
        return KeyValueEmployeeDatabase(DynamoDBEmployeeTable(table_name))
    if backend != "memory":
        raise ValueError(f"Unknown EMPLOYEE_BACKEND {backend!r}; expected 'memory' or 'dynamodb'")
    if not Path(csv_path).exists():
        logger.warning("Roster {} not found; starting with an empty directory", csv_path)
        return InMemoryEmployeeDatabase()
    return InMemoryEmployeeDatabase.from_csv(csv_path)


def build_recommendation_database(
    seed_samples: bool = SEED_SAMPLE_RECOMMENDATIONS,
    samples_path: Path = SAMPLE_RECOMMENDATIONS_PATH,
) -> RecommendationDatabase:
    store = InMemoryRecommendationDatabase()
    if seed_samples:
        if Path(samples_path).exists():
            store.seed(load_sample_recommendations(samples_path))
        else:
            logger.warning("Sample recommendations {} not found; starting empty", samples_path)
    return store


def build_directory() -> TalentDirectory:
    return TalentDirectory(build_employee_database(), build_recommendation_database())
