from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.class_record_model import ClassRecord, AttendanceStatus
from app.models.subject_model import Subject


def month_bounds(year: int, month: int):
    """Trả về (ngày đầu tháng, ngày đầu tháng sau)."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def get_record(db: Session, record_id: int) -> Optional[ClassRecord]:
    return db.query(ClassRecord).filter(ClassRecord.record_id == record_id).first()


def get_records(
    db: Session,
    year: Optional[int] = None,
    month: Optional[int] = None,
    student_id: Optional[int] = None,
    subject: Optional[Subject] = None,
    status: Optional[AttendanceStatus] = None,
) -> List[ClassRecord]:
    """
    Lấy danh sách bản ghi, lọc theo tháng, học sinh, môn và trạng thái điểm danh.
    """
    query = db.query(ClassRecord)
    if year is not None and month is not None:
        start, end = month_bounds(year, month)
        query = query.filter(ClassRecord.record_date >= start, ClassRecord.record_date < end)
    if student_id is not None:
        query = query.filter(ClassRecord.student_id == student_id)
    if subject is not None:
        query = query.filter(ClassRecord.subject == subject)
    if status is not None:
        query = query.filter(ClassRecord.status == status)
    return query.order_by(ClassRecord.record_date, ClassRecord.record_id).all()


def delete_record(db: Session, db_obj: ClassRecord) -> ClassRecord:
    db.delete(db_obj)
    db.commit()
    return db_obj
