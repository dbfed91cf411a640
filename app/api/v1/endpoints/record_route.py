# app/api/v1/endpoints/record_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import class_record_crud
from app.exceptions import ValidationError
from app.models.class_record_model import AttendanceStatus
from app.models.subject_model import Subject
from app.schemas.class_record_schema import (
    ClassRecord,
    ClassRecordCreate,
    RecordBatchResult,
    StudentBatchCreate,
    SubjectBatchCreate,
)
from app.schemas.settlement_schema import MonthlyAttendance
from app.services import record_service

router = APIRouter()


def _ingest(db: Session, records_in: List[ClassRecordCreate]) -> RecordBatchResult:
    try:
        records, replaced = record_service.ingest_records(db, records_in)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return RecordBatchResult(
        created=len(records),
        replaced=replaced,
        records=[ClassRecord.model_validate(r) for r in records],
    )


@router.post(
    "/batch",
    response_model=RecordBatchResult,
    status_code=status.HTTP_201_CREATED,
    summary="Lưu một lô bản ghi buổi học",
)
def create_records(
    records_in: List[ClassRecordCreate],
    db: Session = Depends(deps.get_db)
):
    """
    Lưu nhiều bản ghi một lúc. Bản ghi trùng (học sinh, môn, ngày) sẽ ghi đè bản ghi cũ.
    """
    return _ingest(db, records_in)


@router.post(
    "/batch/by_student",
    response_model=RecordBatchResult,
    status_code=status.HTTP_201_CREATED,
    summary="Nhập theo học sinh (nhiều môn x nhiều ngày)",
)
def create_records_by_student(
    batch: StudentBatchCreate,
    db: Session = Depends(deps.get_db)
):
    try:
        records_in = record_service.build_student_batch(batch)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _ingest(db, records_in)


@router.post(
    "/batch/by_subject",
    response_model=RecordBatchResult,
    status_code=status.HTTP_201_CREATED,
    summary="Nhập theo môn (nhiều học sinh x nhiều ngày)",
)
def create_records_by_subject(
    batch: SubjectBatchCreate,
    db: Session = Depends(deps.get_db)
):
    try:
        records_in = record_service.build_subject_batch(batch)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return _ingest(db, records_in)


@router.get(
    "/",
    response_model=List[ClassRecord],
    summary="Lấy danh sách bản ghi buổi học",
)
def list_records(
    year: Optional[int] = Query(None, ge=1900),
    month: Optional[int] = Query(None, ge=1, le=12),
    student_id: Optional[int] = None,
    subject: Optional[Subject] = None,
    status_filter: Optional[AttendanceStatus] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db)
):
    if (year is None) != (month is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cần truyền cả year và month.")
    return class_record_crud.get_records(
        db, year=year, month=month, student_id=student_id, subject=subject, status=status_filter
    )


@router.get(
    "/monthly",
    response_model=MonthlyAttendance,
    summary="Điểm danh theo tháng (dùng cho lịch)",
)
def get_monthly_attendance(
    year: int = Query(..., ge=1900),
    month: int = Query(..., ge=1, le=12),
    status_filter: Optional[AttendanceStatus] = Query(None, alias="status"),
    db: Session = Depends(deps.get_db)
):
    return record_service.get_monthly_attendance(db, year, month, status=status_filter)


@router.delete(
    "/{record_id}",
    response_model=ClassRecord,
    summary="Xóa một bản ghi buổi học",
)
def delete_record(
    record_id: int,
    db: Session = Depends(deps.get_db)
):
    record = record_service.delete_record(db, record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Không tìm thấy bản ghi.")
    return record
