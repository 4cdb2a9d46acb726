from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError

from reflectnote.models.class_info import ClassInfo
from reflectnote.repositories.classes import ClassRepository
from reflectnote.routes.dependencies import ensure_storage_ready, get_class_repository, storage_unavailable

router = APIRouter(tags=['classes'])


class CreateClassRequest(BaseModel):
    name: str
    year: str
    teacher_id: str
    target_days: int = Field(default=190, ge=1, le=366)

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Class name is required.')
        return normalized


@router.get('/', response_model=list[ClassInfo])
def list_classes(classes: ClassRepository = Depends(get_class_repository)):
    ensure_storage_ready()

    try:
        return classes.list_classes()
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.post('/', response_model=ClassInfo, status_code=status.HTTP_201_CREATED)
def create_class(data: CreateClassRequest, classes: ClassRepository = Depends(get_class_repository)):
    ensure_storage_ready()

    try:
        return classes.add_class(data.name, data.year, data.teacher_id, data.target_days)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.delete('/{class_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_class(class_id: str, classes: ClassRepository = Depends(get_class_repository)):
    ensure_storage_ready()

    try:
        classes.delete_class(class_id)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc
