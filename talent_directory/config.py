from __future__ import annotations
"""
Configuration for the talent directory (paths, tunables, schemas).
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Literal, Optional, get_args

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Paths
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PROJECT_ROOT / "data"
EMPLOYEES_CSV_PATH = Path(os.getenv("EMPLOYEES_CSV_PATH", str(DATA_DIR / "employees.csv")))
SAMPLE_RECOMMENDATIONS_PATH = Path(
    os.getenv("SAMPLE_RECOMMENDATIONS_PATH", str(DATA_DIR / "sample_recommendations.json"))
)
LOG_DIR = PROJECT_ROOT / "logs"

# Backends
EMPLOYEE_BACKEND = os.getenv("EMPLOYEE_BACKEND", "memory")  # "memory" | "dynamodb"
EMPLOYEE_TABLE_NAME = os.getenv("EMPLOYEE_TABLE_NAME", "employees")
AWS_REGION = os.getenv("AWS_REGION", "ap-northeast-1")
SEED_SAMPLE_RECOMMENDATIONS = os.getenv("SEED_SAMPLE_RECOMMENDATIONS", "1") == "1"

# Server / logging
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", os.getenv("PORT", "8080")))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Similarity weights (smaller score = more similar)
AGE_WEIGHT = 0.3
DEPARTMENT_WEIGHT = 0.2
POSITION_WEIGHT = 0.2
TECH_STACK_WEIGHT = 0.3
SIMILAR_TOP_N = 10

# Dashboard sizes
STATS_TOP_CATEGORIES = 3
STATS_TOP_IMPACTS = 3
STATS_RECENT = 3
STATS_TOP_EMPLOYEES = 5

# Recommendation vocabulary
Category = Literal[
    "mentoring",
    "code_review",
    "knowledge_sharing",
    "team_support",
    "problem_solving",
    "innovation",
    "leadership",
    "other",
]
Impact = Literal["low", "medium", "high", "critical"]
Role = Literal["to", "from"]

RECOMMENDATION_CATEGORIES: List[str] = list(get_args(Category))
RECOMMENDATION_IMPACTS: List[str] = list(get_args(Impact))

CATEGORY_LABELS = {
    "mentoring": "Mentoring",
    "code_review": "Code review",
    "knowledge_sharing": "Knowledge sharing",
    "team_support": "Team support",
    "problem_solving": "Problem solving",
    "innovation": "Innovation",
    "leadership": "Leadership",
    "other": "Other",
}
IMPACT_LABELS = {
    "low": "Low",
    "medium": "Medium",
    "high": "High",
    "critical": "Critical",
}


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp.  A trailing ``Z`` is accepted and naive
    values are treated as UTC so that every parsed value is comparable.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now_iso() -> str:
    """Current UTC time in the ``2024-01-15T10:00:00.000Z`` form."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def configure_logging(level: str = LOG_LEVEL, log_to_file: bool = True) -> None:
    """Install the stderr sink (and a rotating file sink under ``logs/``)."""
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_to_file:
        LOG_DIR.mkdir(exist_ok=True)
        logger.add(LOG_DIR / "talent_directory.log", level=level, rotation="10 MB", retention=5)


# Pydantic schemas
class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TechStack(_Schema):
    name: str
    level: int


class Employee(_Schema):
    id: str
    name: str
    age: int
    department: str = ""
    position: str = ""
    tech_stacks: List[TechStack] = Field(default_factory=list, alias="techStacks")


class Recommendation(_Schema):
    id: str
    from_employee_id: str = Field(alias="fromEmployeeId")
    to_employee_id: str = Field(alias="toEmployeeId")
    category: Category
    title: str
    description: str
    impact: Impact
    created_at: str = Field(alias="createdAt")
    is_anonymous: bool = Field(alias="isAnonymous")
    tags: List[str]

    @field_validator("created_at")
    @classmethod
    def _created_at_is_iso(cls, value: str) -> str:
        parse_timestamp(value)
        return value


class RecommendationCreate(_Schema):
    from_employee_id: str = Field(alias="fromEmployeeId")
    to_employee_id: str = Field(alias="toEmployeeId")
    category: Category
    title: str
    description: str
    impact: Impact
    is_anonymous: bool = Field(alias="isAnonymous")
    tags: List[str]


class RecommendationUpdate(_Schema):
    """Partial update; only the fields that were actually sent are merged."""

    from_employee_id: Optional[str] = Field(default=None, alias="fromEmployeeId")
    to_employee_id: Optional[str] = Field(default=None, alias="toEmployeeId")
    category: Optional[Category] = None
    title: Optional[str] = None
    description: Optional[str] = None
    impact: Optional[Impact] = None
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    is_anonymous: Optional[bool] = Field(default=None, alias="isAnonymous")
    tags: Optional[List[str]] = None


class SimilarEmployeeItem(Employee):
    similarity_score: float = Field(alias="similarityScore")


class CategoryCount(_Schema):
    category: str
    count: int


class ImpactCount(_Schema):
    impact: str
    count: int


class EmployeeCount(_Schema):
    employee: Employee
    count: int


class DashboardStats(_Schema):
    total_recommendations: int = Field(alias="totalRecommendations")
    total_employees: int = Field(alias="totalEmployees")
    top_categories: List[CategoryCount] = Field(alias="topCategories")
    top_impacts: List[ImpactCount] = Field(alias="topImpacts")
    recent_recommendations: List[Recommendation] = Field(alias="recentRecommendations")
    top_employees: List[EmployeeCount] = Field(alias="topEmployees")


class HealthResponse(BaseModel):
    status: str
