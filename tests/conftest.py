"""
Shared test fixtures for the talent directory tests.
"""
import os
from unittest.mock import MagicMock

import pytest

# Keep tests away from the shipped data files and any real AWS table
os.environ.setdefault("EMPLOYEE_BACKEND", "memory")
os.environ.setdefault("SEED_SAMPLE_RECOMMENDATIONS", "0")

from talent_directory.employee_store import InMemoryEmployeeDatabase  # noqa: E402
from talent_directory.recommendation_store import InMemoryRecommendationDatabase  # noqa: E402
from talent_directory.service import TalentDirectory  # noqa: E402


@pytest.fixture
def employee_records():
    """The three-employee roster used throughout the examples."""
    return [
        {
            "id": "1",
            "name": "Jane Doe",
            "age": 22,
            "department": "Engineering",
            "position": "Software Engineer",
            "techStacks": [{"name": "Python", "level": 3}, {"name": "TypeScript", "level": 2}],
        },
        {
            "id": "2",
            "name": "John Smith",
            "age": 28,
            "department": "Engineering",
            "position": "Senior Software Engineer",
            "techStacks": [{"name": "Python", "level": 4}, {"name": "Go", "level": 3}],
        },
        {
            "id": "3",
            "name": "山田 太郎",
            "age": 27,
            "department": "Product",
            "position": "Product Manager",
            "techStacks": [{"name": "SQL", "level": 2}],
        },
    ]


@pytest.fixture
def employee_db(employee_records):
    return InMemoryEmployeeDatabase(employee_records)


@pytest.fixture
def recommendation_payload():
    return {
        "fromEmployeeId": "2",
        "toEmployeeId": "1",
        "category": "mentoring",
        "title": "Great mentor",
        "description": "Helped the new joiners ramp up quickly.",
        "impact": "high",
        "isAnonymous": False,
        "tags": ["mentoring", "onboarding"],
    }


@pytest.fixture
def sample_recommendations():
    """Complete records with fixed ids and timestamps, oldest first."""
    base = {
        "title": "t",
        "description": "d",
        "isAnonymous": False,
    }
    return [
        {**base, "id": "rec_1", "fromEmployeeId": "2", "toEmployeeId": "1", "category": "mentoring",
         "impact": "high", "createdAt": "2024-01-15T10:00:00Z", "tags": ["mentoring", "onboarding"]},
        {**base, "id": "rec_2", "fromEmployeeId": "3", "toEmployeeId": "1", "category": "code_review",
         "impact": "critical", "createdAt": "2024-01-20T14:30:00Z", "tags": ["code review", "quality"]},
        {**base, "id": "rec_3", "fromEmployeeId": "1", "toEmployeeId": "2", "category": "knowledge_sharing",
         "impact": "high", "createdAt": "2024-01-25T16:00:00Z", "tags": ["study group"]},
        {**base, "id": "rec_4", "fromEmployeeId": "1", "toEmployeeId": "3", "category": "mentoring",
         "impact": "medium", "createdAt": "2024-02-01T09:15:00Z", "tags": ["debugging", "quality"]},
    ]


@pytest.fixture
def recommendation_db(sample_recommendations):
    return InMemoryRecommendationDatabase(sample_recommendations)


@pytest.fixture
def directory(employee_db, recommendation_db):
    return TalentDirectory(employee_db, recommendation_db)


@pytest.fixture
def dynamodb_item():
    def _item(employee_id="1", name="Jane Doe", age="22", **extra):
        item = {"id": {"S": employee_id}, "name": {"S": name}}
        if age is not None:
            item["age"] = {"N": age}
        item.update(extra)
        return item

    return _item


@pytest.fixture
def mock_dynamodb_client():
    """Mock boto3 DynamoDB client."""
    client = MagicMock()
    client.get_item = MagicMock(return_value={})
    client.scan = MagicMock(return_value={"Items": []})
    client.put_item = MagicMock(return_value={})
    return client
