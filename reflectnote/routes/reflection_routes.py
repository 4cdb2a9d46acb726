from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError

from reflectnote.models.analysis import AnalysisEntry
from reflectnote.models.reflection import Reflection
from reflectnote.repositories.analyses import AnalysisCache
from reflectnote.repositories.reflections import ReflectionRepository
from reflectnote.routes.dependencies import (
    ensure_storage_ready,
    get_analysis_cache,
    get_reflection_repository,
    storage_unavailable,
)

router = APIRouter(tags=['reflections'])

MAX_FEEDBACK_LENGTH = 1000


class CreateReflectionRequest(BaseModel):
    student_id: str
    class_id: str | None = None
    date: str | None = None
    content: str

    @field_validator('content')
    @classmethod
    def validate_content(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Reflection content is required.')
        return normalized


class FeedbackRequest(BaseModel):
    feedback: str

    @field_validator('feedback')
    @classmethod
    def validate_feedback(cls, value: str) -> str:
        normalized = value.strip()
        if len(normalized) > MAX_FEEDBACK_LENGTH:
            raise ValueError(f'Feedback must be {MAX_FEEDBACK_LENGTH} characters or fewer.')
        return normalized


@router.get('/', response_model=list[Reflection])
def list_reflections(reflections: ReflectionRepository = Depends(get_reflection_repository)):
    ensure_storage_ready()

    try:
        return reflections.list_reflections()
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.post('/', response_model=Reflection, status_code=status.HTTP_201_CREATED)
def create_reflection(
    data: CreateReflectionRequest,
    reflections: ReflectionRepository = Depends(get_reflection_repository),
):
    ensure_storage_ready()

    try:
        reflection = Reflection(id=reflections.id_factory(), **data.model_dump())
        return reflections.add_reflection(reflection)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.put('/{reflection_id}/feedback', status_code=status.HTTP_204_NO_CONTENT)
def update_feedback(
    reflection_id: str,
    data: FeedbackRequest,
    reflections: ReflectionRepository = Depends(get_reflection_repository),
):
    ensure_storage_ready()

    try:
        reflections.update_reflection_feedback(reflection_id, data.feedback)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.get('/analyses', response_model=dict[str, AnalysisEntry])
def list_analyses(analyses: AnalysisCache = Depends(get_analysis_cache)):
    ensure_storage_ready()

    try:
        return analyses.get_analyses()
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.put('/analyses/{key}', response_model=AnalysisEntry)
def store_analysis(
    key: str,
    result: dict[str, Any],
    analyses: AnalysisCache = Depends(get_analysis_cache),
):
    ensure_storage_ready()

    try:
        return analyses.set_analysis(key, result)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc
