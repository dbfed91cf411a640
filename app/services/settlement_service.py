import logging
from collections import defaultdict
from typing import Optional

from sqlalchemy.orm import Session

from app.crud import class_record_crud, student_crud
from app.models.class_record_model import AttendanceStatus
from app.models.subject_model import Subject
from app.schemas.class_record_schema import ClassRecord as ClassRecordSchema
from app.schemas.settlement_schema import (
    DashboardOverview,
    PeriodSettlement,
    StudentSettlement,
    SubjectDetail,
    SubjectSummary,
)
from app.services import price_rule_service
from app.services.settlement_calculator import (
    aggregate_period,
    calculate_settlement,
    is_empty_settlement,
)

logger = logging.getLogger(__name__)


def _label(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def settle_period(db: Session, year: int, month: int, rule_id: Optional[int] = None) -> Optional[PeriodSettlement]:
    """
    Quyết toán học phí của tất cả học sinh trong một tháng với bảng giá được chọn
    (mặc định là bảng giá đang áp dụng). Trả về None khi chưa có bảng giá nào.
    """
    rule = price_rule_service.resolve_rule(db, rule_id)
    if rule is None:
        return None

    students = student_crud.get_all_students(db, limit=None)
    records = class_record_crud.get_records(db, year=year, month=month)
    settlements, total_revenue = aggregate_period(students, records, rule, year, month)

    logger.info(
        f"Settled {_label(year, month)} with rule {rule.rule_id}: "
        f"{len(settlements)} students, revenue {total_revenue}"
    )
    return PeriodSettlement(
        year=year,
        month=month,
        period=_label(year, month),
        rule_id=rule.rule_id,
        rule_name=rule.name,
        settlements=settlements,
        total_revenue=total_revenue,
    )


def settle_student(
    db: Session, student_id: int, year: int, month: int, rule_id: Optional[int] = None
) -> Optional[StudentSettlement]:
    student = student_crud.get_student(db, student_id)
    rule = price_rule_service.resolve_rule(db, rule_id)
    if student is None or rule is None:
        return None
    records = class_record_crud.get_records(db, year=year, month=month, student_id=student_id)
    return calculate_settlement(student, records, rule, period=_label(year, month))


def get_dashboard_overview(db: Session) -> Optional[DashboardOverview]:
    """
    Tổng quan toàn thời gian với bảng giá mặc định: doanh thu, số giờ,
    số học sinh và doanh thu theo môn.
    """
    rule = price_rule_service.resolve_default_rule(db)
    if rule is None:
        return None

    students = student_crud.get_all_students(db, limit=None)
    records_by_student = defaultdict(list)
    for record in class_record_crud.get_records(db):
        records_by_student[record.student_id].append(record)

    by_subject = {subject: SubjectSummary() for subject in Subject}
    total_revenue = 0
    total_hours = 0
    active_count = 0
    for student in students:
        student_records = records_by_student.get(student.student_id, [])
        # Không giới hạn kỳ: nhãn kỳ lấy theo bản ghi đầu tiên
        settlement = calculate_settlement(student, student_records, rule)
        total_revenue += settlement.total_amount
        total_hours += settlement.total_hours
        if not is_empty_settlement(settlement):
            active_count += 1
        for item in settlement.items:
            by_subject[item.subject].revenue += item.subtotal
            by_subject[item.subject].hours += item.total_hours

    return DashboardOverview(
        rule_id=rule.rule_id,
        rule_name=rule.name,
        total_revenue=total_revenue,
        total_hours=total_hours,
        student_count=len(students),
        active_student_count=active_count,
        by_subject=by_subject,
    )


def get_subject_detail(
    db: Session, student_id: int, subject: Subject, year: int, month: int
) -> SubjectDetail:
    """Các buổi học của một môn trong tháng, sắp xếp theo ngày."""
    records = class_record_crud.get_records(
        db, year=year, month=month, student_id=student_id, subject=subject
    )
    billable_hours = sum(r.count for r in records if r.status == AttendanceStatus.present)
    return SubjectDetail(
        student_id=student_id,
        subject=subject,
        period=_label(year, month),
        records=[ClassRecordSchema.model_validate(r) for r in records],
        billable_hours=billable_hours,
    )
