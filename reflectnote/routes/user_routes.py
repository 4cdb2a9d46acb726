from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError

from reflectnote.errors import DuplicateStudentIdError
from reflectnote.models.user import BulkImportResult, StudentData, StudentImport, User
from reflectnote.repositories.users import UserRepository
from reflectnote.routes.dependencies import ensure_storage_ready, get_user_repository, storage_unavailable

router = APIRouter(tags=['users'])


def _require_text(value: str, label: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError(f'{label} is required.')
    return normalized


class CreateTeacherRequest(BaseModel):
    name: str
    login_id: str
    password_hash: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _require_text(value, 'Name')

    @field_validator('login_id')
    @classmethod
    def validate_login_id(cls, value: str) -> str:
        return _require_text(value, 'Login ID')


class UpsertStudentRequest(BaseModel):
    id: str | None = None
    name: str | None = None
    student_id: str | None = None
    class_id: str | None = None

    @field_validator('student_id')
    @classmethod
    def validate_student_id(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_text(value, 'Student ID')


class BulkStudentRow(BaseModel):
    name: str
    student_id: str

    @field_validator('student_id')
    @classmethod
    def validate_student_id(cls, value: str) -> str:
        return _require_text(value, 'Student ID')


class BulkImportRequest(BaseModel):
    class_id: str
    students: list[BulkStudentRow]


class UserResponse(BaseModel):
    id: str
    role: str
    name: str
    login_id: str
    student_id: str | None = None
    class_id: str | None = None
    lifecycle: str
    is_active: bool
    is_first_login: bool

    @classmethod
    def from_user(cls, user: User) -> 'UserResponse':
        # passwordHash is never returned.
        return cls(
            id=user.id,
            role=user.role.value,
            name=user.name,
            login_id=user.login_id,
            student_id=user.student_id,
            class_id=user.class_id,
            lifecycle=user.lifecycle.value,
            is_active=user.is_active,
            is_first_login=user.is_first_login,
        )


@router.get('/', response_model=list[UserResponse])
def list_users(users: UserRepository = Depends(get_user_repository)):
    ensure_storage_ready()

    try:
        return [UserResponse.from_user(user) for user in users.list_users()]
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.post('/teachers', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_teacher(data: CreateTeacherRequest, users: UserRepository = Depends(get_user_repository)):
    ensure_storage_ready()

    try:
        teacher = users.add_teacher(data.name, data.login_id, data.password_hash)
        return UserResponse.from_user(teacher)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.post('/students', response_model=UserResponse)
def upsert_student(data: UpsertStudentRequest, users: UserRepository = Depends(get_user_repository)):
    ensure_storage_ready()

    try:
        student = users.upsert_student(StudentData(**data.model_dump(exclude_unset=True)))
    except DuplicateStudentIdError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc

    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Student not found.')
    return UserResponse.from_user(student)


@router.post('/students/bulk', response_model=BulkImportResult)
def bulk_import_students(data: BulkImportRequest, users: UserRepository = Depends(get_user_repository)):
    ensure_storage_ready()

    try:
        return users.bulk_upsert_students(
            StudentImport(name=row.name, student_id=row.student_id, class_id=data.class_id)
            for row in data.students
        )
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.post('/{user_id}/deactivate', status_code=status.HTTP_204_NO_CONTENT)
def deactivate_user(user_id: str, users: UserRepository = Depends(get_user_repository)):
    ensure_storage_ready()

    try:
        users.deactivate_user(user_id)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.post('/{user_id}/reactivate', status_code=status.HTTP_204_NO_CONTENT)
def reactivate_user(user_id: str, users: UserRepository = Depends(get_user_repository)):
    ensure_storage_ready()

    try:
        users.reactivate_user(user_id)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc


@router.post('/{user_id}/reset-password', status_code=status.HTTP_204_NO_CONTENT)
def reset_password(user_id: str, users: UserRepository = Depends(get_user_repository)):
    ensure_storage_ready()

    try:
        users.reset_user_password(user_id)
    except SQLAlchemyError as exc:
        raise storage_unavailable() from exc
