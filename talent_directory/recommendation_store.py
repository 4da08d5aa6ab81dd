from __future__ import annotations

"""
Peer recommendation store.

Recommendations live in an insertion-ordered map keyed by a server
generated id.  Every read that returns several records sorts them by
``createdAt``, most recent first; records with the same timestamp keep
their insertion order.  Create and update validate the full record
before anything is stored, so a failed write leaves the store exactly
as it was.
"""

import json
import time
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger
from pydantic import ValidationError

from .config import (
    Category,
    Impact,
    Recommendation,
    RecommendationCreate,
    RecommendationUpdate,
    Role,
    parse_timestamp,
    utc_now_iso,
)
from .mapping import decode_recommendation, validation_messages

CreatePayload = Union[RecommendationCreate, Mapping[str, Any]]
UpdatePayload = Union[RecommendationUpdate, Mapping[str, Any]]


class RecommendationValidationError(ValueError):
    """The assembled recommendation does not satisfy the schema."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("Invalid recommendation data: " + "; ".join(self.errors))


def sort_by_recency(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    # sorted() is stable with reverse=True, so ties keep insertion order
    return sorted(recommendations, key=lambda r: parse_timestamp(r.created_at), reverse=True)


def _validate(model, payload: Any):
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        raise RecommendationValidationError(validation_messages(exc)) from exc
    except (TypeError, ValueError) as exc:
        raise RecommendationValidationError([str(exc)]) from exc


def _detached(recommendation: Recommendation) -> Recommendation:
    # frozen models still hold a mutable tags list
    return recommendation.model_copy(deep=True)


class RecommendationDatabase(ABC):
    @abstractmethod
    def create_recommendation(self, payload: CreatePayload) -> Recommendation: ...

    @abstractmethod
    def get_recommendation(self, recommendation_id: str) -> Optional[Recommendation]: ...

    @abstractmethod
    def update_recommendation(
        self, recommendation_id: str, updates: UpdatePayload
    ) -> Optional[Recommendation]: ...

    @abstractmethod
    def delete_recommendation(self, recommendation_id: str) -> bool: ...

    @abstractmethod
    def get_all_recommendations(self) -> List[Recommendation]: ...

    def get_recommendations_for_employee(self, employee_id: str) -> List[Recommendation]:
        """Recommendations the employee received."""
        return [r for r in self.get_all_recommendations() if r.to_employee_id == employee_id]

    def get_recommendations_from_employee(self, employee_id: str) -> List[Recommendation]:
        """Recommendations the employee sent."""
        return [r for r in self.get_all_recommendations() if r.from_employee_id == employee_id]

    def get_recommendations_by_role(self, employee_id: str, role: Role) -> List[Recommendation]:
        if role == "to":
            return self.get_recommendations_for_employee(employee_id)
        if role == "from":
            return self.get_recommendations_from_employee(employee_id)
        raise ValueError(f"Unknown role {role!r}; expected 'to' or 'from'")

    def get_recommendations_by_category(self, category: Category) -> List[Recommendation]:
        return [r for r in self.get_all_recommendations() if r.category == category]

    def get_recommendations_by_impact(self, impact: Impact) -> List[Recommendation]:
        return [r for r in self.get_all_recommendations() if r.impact == impact]

    def search_recommendations_by_tags(self, tags: Iterable[str]) -> List[Recommendation]:
        """Recommendations carrying at least one of ``tags``."""
        wanted = set(tags)
        return [r for r in self.get_all_recommendations() if wanted.intersection(r.tags)]


class InMemoryRecommendationDatabase(RecommendationDatabase):
    def __init__(self, seed: Iterable[Any] = ()):
        self._recommendations: "OrderedDict[str, Recommendation]" = OrderedDict()
        self.seed(seed)

    def __len__(self) -> int:
        return len(self._recommendations)

    def seed(self, records: Iterable[Any]) -> int:
        """Insert complete records (ids and timestamps included); invalid ones are skipped."""
        loaded = 0
        for raw in records:
            result = decode_recommendation(raw)
            if not result.ok:
                logger.warning("Skipping invalid sample recommendation: {}", result.error)
                continue
            self._recommendations[result.value.id] = result.value
            loaded += 1
        if loaded:
            logger.info("Loaded {} sample recommendations", loaded)
        return loaded

    def _generate_id(self) -> str:
        while True:
            candidate = f"rec_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
            if candidate not in self._recommendations:
                return candidate

    def create_recommendation(self, payload: CreatePayload) -> Recommendation:
        fields = _validate(RecommendationCreate, payload).model_dump(by_alias=True)
        fields["id"] = self._generate_id()
        fields["createdAt"] = utc_now_iso()
        recommendation = _validate(Recommendation, fields)
        self._recommendations[recommendation.id] = recommendation
        logger.info(
            "Created recommendation {} ({} -> {}, {})",
            recommendation.id,
            recommendation.from_employee_id,
            recommendation.to_employee_id,
            recommendation.category,
        )
        return _detached(recommendation)

    def get_recommendation(self, recommendation_id: str) -> Optional[Recommendation]:
        recommendation = self._recommendations.get(recommendation_id)
        return _detached(recommendation) if recommendation is not None else None

    def update_recommendation(
        self, recommendation_id: str, updates: UpdatePayload
    ) -> Optional[Recommendation]:
        existing = self._recommendations.get(recommendation_id)
        if existing is None:
            return None
        changes = _validate(RecommendationUpdate, updates).model_dump(by_alias=True, exclude_unset=True)
        merged: Dict[str, Any] = {**existing.model_dump(by_alias=True), **changes}
        merged["id"] = recommendation_id
        updated = _validate(Recommendation, merged)
        self._recommendations[recommendation_id] = updated
        logger.info("Updated recommendation {} (fields: {})", recommendation_id, sorted(changes))
        return _detached(updated)

    def delete_recommendation(self, recommendation_id: str) -> bool:
        if self._recommendations.pop(recommendation_id, None) is None:
            return False
        logger.info("Deleted recommendation {}", recommendation_id)
        return True

    def get_all_recommendations(self) -> List[Recommendation]:
        return [_detached(r) for r in sort_by_recency(self._recommendations.values())]


def load_sample_recommendations(path: Path) -> List[Dict[str, Any]]:
    """Read the sample recommendations shipped under ``data/``."""
    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Expected a JSON list of recommendations in {path}")
    return records
