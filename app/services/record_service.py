import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.crud import class_record_crud, student_crud
from app.exceptions import ValidationError
from app.models.class_record_model import ClassRecord, AttendanceStatus
from app.models.subject_model import Subject
from app.schemas.class_record_schema import (
    ClassRecordCreate,
    RecordDetails,
    StudentBatchCreate,
    SubjectBatchCreate,
)
from app.schemas.class_record_schema import ClassRecord as ClassRecordSchema
from app.schemas.settlement_schema import MonthlyAttendance

logger = logging.getLogger(__name__)


def record_key(record) -> tuple:
    return (record.student_id, Subject(record.subject), record.record_date)


def _make_record(student_id: int, subject: Subject, record_date, details: RecordDetails) -> ClassRecordCreate:
    return ClassRecordCreate(
        student_id=student_id,
        subject=subject,
        record_date=record_date,
        count=details.count,
        status=details.status,
        material_fee=details.material_fee,
        teacher=details.teacher,
        remarks=details.remarks,
    )


def build_student_batch(batch: StudentBatchCreate) -> List[ClassRecordCreate]:
    """Nhập theo học sinh: mỗi ngày x mỗi môn tạo một bản ghi."""
    if not batch.dates:
        raise ValidationError("Vui lòng chọn ít nhất một ngày.")
    if batch.student_id is None or not batch.subjects:
        raise ValidationError("Vui lòng chọn học sinh và ít nhất một môn.")
    return [
        _make_record(batch.student_id, subject, record_date, batch)
        for record_date in batch.dates
        for subject in batch.subjects
    ]


def build_subject_batch(batch: SubjectBatchCreate) -> List[ClassRecordCreate]:
    """Nhập theo môn: mỗi ngày x mỗi học sinh tạo một bản ghi."""
    if not batch.dates:
        raise ValidationError("Vui lòng chọn ít nhất một ngày.")
    if batch.subject is None or not batch.student_ids:
        raise ValidationError("Vui lòng chọn môn và ít nhất một học sinh.")
    return [
        _make_record(student_id, batch.subject, record_date, batch)
        for record_date in batch.dates
        for student_id in batch.student_ids
    ]


def ingest_records(db: Session, records_in: List[ClassRecordCreate]) -> Tuple[List[ClassRecord], int]:
    """
    Ghi một lô bản ghi buổi học.

    Bản ghi đã có cùng khóa (học sinh, môn, ngày) bị thay thế bởi bản ghi mới;
    trong cùng một lô, bản ghi xuất hiện sau thắng. Trả về (các bản ghi đã lưu, số bản ghi bị thay thế).
    """
    if not records_in:
        raise ValidationError("Không có bản ghi nào để lưu.")

    incoming: Dict[tuple, ClassRecordCreate] = {}
    for record in records_in:
        incoming[record_key(record)] = record

    student_ids = {key[0] for key in incoming}
    existing_ids = {s.student_id for s in student_crud.get_students_by_ids(db, list(student_ids))}
    missing = sorted(student_ids - existing_ids)
    if missing:
        raise ValidationError(f"Students with ids {missing} not found.")

    dates = {key[2] for key in incoming}
    try:
        candidates = (
            db.query(ClassRecord)
            .filter(
                ClassRecord.student_id.in_(list(student_ids)),
                ClassRecord.record_date.in_(list(dates)),
            )
            .all()
        )
        replaced = 0
        for stored in candidates:
            if stored.key in incoming:
                db.delete(stored)
                replaced += 1
        # xóa trước khi thêm để không vi phạm ràng buộc unique
        db.flush()

        new_records = [ClassRecord(**record.model_dump()) for record in incoming.values()]
        db.add_all(new_records)
        db.commit()
    except Exception:
        db.rollback()
        raise

    for record in new_records:
        db.refresh(record)
    logger.info(f"Ingested {len(new_records)} class records ({replaced} replaced)")
    return new_records, replaced


def delete_record(db: Session, record_id: int) -> Optional[ClassRecord]:
    record = class_record_crud.get_record(db, record_id)
    if record is None:
        return None
    return class_record_crud.delete_record(db, record)


def get_monthly_attendance(
    db: Session, year: int, month: int, status: Optional[AttendanceStatus] = None
) -> MonthlyAttendance:
    """Bản ghi trong tháng và số bản ghi theo ngày/môn cho lịch."""
    records = class_record_crud.get_records(db, year=year, month=month, status=status)
    calendar: Dict[str, Dict[Subject, int]] = defaultdict(lambda: defaultdict(int))
    for record in records:
        calendar[record.record_date.isoformat()][Subject(record.subject)] += 1
    return MonthlyAttendance(
        year=year,
        month=month,
        records=[ClassRecordSchema.model_validate(r) for r in records],
        calendar={day: dict(counts) for day, counts in calendar.items()},
    )
