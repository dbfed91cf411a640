# app/api/v1/endpoints/student_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import student_crud
from app.models.subject_model import Subject
from app.schemas import student_schema
from app.services.service_helper import get_utc_now

router = APIRouter()


@router.post(
    "/",
    response_model=student_schema.Student,
    status_code=status.HTTP_201_CREATED,
    summary="Tạo học sinh mới",
)
def create_new_student(
    student_in: student_schema.StudentCreate,
    db: Session = Depends(deps.get_db)
):
    return student_crud.create_student(db, student_in)


@router.get(
    "/",
    response_model=List[student_schema.Student],
    summary="Lấy danh sách học sinh",
)
def get_all_students(
    grade: Optional[str] = None,
    subject: Optional[Subject] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(deps.get_db)
):
    """
    Lấy danh sách học sinh, có thể lọc theo lớp (`grade`) và môn đã đăng ký (`subject`).
    """
    return student_crud.get_all_students(db, grade=grade, subject=subject, skip=skip, limit=limit)


@router.get(
    "/{student_id}",
    response_model=student_schema.Student,
    summary="Lấy thông tin một học sinh",
)
def get_student(
    student_id: int,
    db: Session = Depends(deps.get_db)
):
    db_student = student_crud.get_student(db, student_id)
    if db_student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Không tìm thấy học sinh.")
    return db_student


@router.put(
    "/{student_id}",
    response_model=student_schema.Student,
    summary="Cập nhật thông tin học sinh",
)
def update_existing_student(
    student_id: int,
    student_update: student_schema.StudentUpdate,
    db: Session = Depends(deps.get_db)
):
    db_student = student_crud.get_student(db, student_id)
    if db_student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Không tìm thấy học sinh.")
    return student_crud.update_student(db, db_obj=db_student, obj_in=student_update)


@router.delete(
    "/{student_id}",
    response_model=dict,
    summary="Xóa học sinh",
)
def delete_existing_student(
    student_id: int,
    db: Session = Depends(deps.get_db)
):
    """
    Xóa học sinh cùng toàn bộ bản ghi buổi học của học sinh đó.
    """
    db_student = student_crud.get_student(db, student_id)
    if db_student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Không tìm thấy học sinh.")

    deleted = student_schema.Student.model_validate(db_student)
    student_crud.delete_student(db, db_obj=db_student)
    return {
        "deleted_student": deleted.model_dump(mode="json"),
        "deleted_at": get_utc_now().isoformat(),
        "status": "success"
    }
