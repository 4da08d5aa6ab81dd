from __future__ import annotations

"""
FastAPI application for the talent directory.

- Employees: keyword search, lookup by id, similar employees
- Recommendations: CRUD, per-employee listings, category/impact/tag filters
- Dashboard statistics
- Responses use the camelCase field names of the schemas
"""

from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import ValidationError

from .config import (
    Category,
    DashboardStats,
    Employee,
    HealthResponse,
    Impact,
    Recommendation,
    RecommendationCreate,
    Role,
    SimilarEmployeeItem,
)
from .mapping import MalformedRecordError, validation_messages
from .recommendation_store import RecommendationValidationError
from .service import TalentDirectory, build_directory

app = FastAPI(title="talent-directory")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_directory: Optional[TalentDirectory] = None


def get_directory() -> TalentDirectory:
    global _directory
    if _directory is None:
        _directory = build_directory()
    return _directory


def set_directory(directory: Optional[TalentDirectory]) -> None:
    global _directory
    _directory = directory


@app.on_event("startup")
def startup_event() -> None:
    logger.info("Starting talent directory...")
    directory = get_directory()
    logger.info(
        "Directory ready: {} employees, {} recommendations",
        len(directory.list_employees("")),
        len(directory.list_all()),
    )


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


# =============================================================================
# Employees
# =============================================================================

@app.get("/api/employees", response_model=List[Employee])
def list_employees(filterText: List[str] = Query(default=[])):
    if len(filterText) > 1:
        # multiple filterText values are not supported
        raise HTTPException(status_code=400, detail="Only one filterText is supported")
    filter_text = filterText[0] if filterText else ""
    try:
        return get_directory().list_employees(filter_text)
    except Exception as e:
        logger.exception("Failed to load the employees filtered by {!r}: {}", filter_text, e)
        raise HTTPException(status_code=500, detail="Failed to load employees")


@app.get("/api/employees/{employee_id}", response_model=Employee)
def get_employee(employee_id: str):
    try:
        employee = get_directory().get_employee(employee_id)
    except MalformedRecordError as e:
        logger.error("Failed to load the employee {}: {}", employee_id, e)
        raise HTTPException(status_code=500, detail="Failed to load employee")
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


@app.get("/api/employees/{employee_id}/similar", response_model=List[SimilarEmployeeItem])
def similar_employees(employee_id: str, topk: int = Query(default=10, ge=1, le=100)):
    try:
        ranked = get_directory().similar_employees(employee_id, top_n=topk)
    except MalformedRecordError as e:
        logger.error("Failed to load the employee {}: {}", employee_id, e)
        raise HTTPException(status_code=500, detail="Failed to load employee")
    if ranked is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return [
        SimilarEmployeeItem(**s.employee.model_dump(), similarity_score=s.score)
        for s in ranked
    ]


@app.get("/api/employees/{employee_id}/recommendations", response_model=List[Recommendation])
def employee_recommendations(employee_id: str, role: Role = "to"):
    return get_directory().list_recommendations_for(employee_id, role)


# =============================================================================
# Recommendations
# =============================================================================

@app.post("/api/recommendations", response_model=Recommendation, status_code=201)
def create_recommendation(payload: Dict[str, Any] = Body(...)):
    logger.info("Received recommendation data: {}", payload)
    try:
        request = RecommendationCreate.model_validate(payload)
    except ValidationError as e:
        details = validation_messages(e)
        logger.warning("Recommendation validation error: {}", details)
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid recommendation data", "details": details},
        )
    try:
        return get_directory().create_recommendation(request)
    except RecommendationValidationError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid recommendation data", "details": e.errors},
        )


@app.get("/api/recommendations", response_model=List[Recommendation])
def list_recommendations(
    category: Optional[Category] = None,
    impact: Optional[Impact] = None,
    tag: List[str] = Query(default=[]),
):
    return get_directory().filter_recommendations(category=category, impact=impact, tags=tag)


@app.get("/api/recommendations/stats", response_model=DashboardStats)
def recommendation_stats():
    return get_directory().dashboard_stats()


@app.get("/api/recommendations/{recommendation_id}", response_model=Recommendation)
def get_recommendation(recommendation_id: str):
    recommendation = get_directory().get_recommendation(recommendation_id)
    if recommendation is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return recommendation


@app.put("/api/recommendations/{recommendation_id}", response_model=Recommendation)
def update_recommendation(recommendation_id: str, updates: Dict[str, Any] = Body(...)):
    try:
        recommendation = get_directory().update_recommendation(recommendation_id, updates)
    except RecommendationValidationError as e:
        logger.warning("Failed to update recommendation {}: {}", recommendation_id, e)
        raise HTTPException(
            status_code=400,
            detail={"error": "Invalid recommendation data", "details": e.errors},
        )
    if recommendation is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return recommendation


@app.delete("/api/recommendations/{recommendation_id}", status_code=204)
def delete_recommendation(recommendation_id: str):
    if not get_directory().delete_recommendation(recommendation_id):
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return Response(status_code=204)
