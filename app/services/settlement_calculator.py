"""
Tính học phí theo tháng cho từng học sinh.

Các hàm trong module này là hàm thuần: không đọc/ghi database, chỉ nhận
học sinh, danh sách bản ghi buổi học và một bảng giá rồi trả về kết quả.
Đầu vào có thể là model SQLAlchemy hoặc schema pydantic (chỉ cần đúng thuộc tính).
"""
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from app.models.class_record_model import AttendanceStatus
from app.models.subject_model import Subject
from app.schemas.settlement_schema import SettlementItem, StudentSettlement
from app.schemas.student_schema import Student as StudentSchema


def period_label(value: date) -> str:
    return value.strftime("%Y-%m")


def resolve_non_chinese_price(price_rule, non_chinese_count: int, is_old_student: bool) -> float:
    """
    Giá theo giờ cho các môn không phải Ngữ văn, phụ thuộc số môn khác nhau (N):
    - N = 1, 2: giá cơ bản
    - N = 3: giá giảm, tách theo học viên cũ / mới
    - N >= 4: giá 4 môn
    """
    if non_chinese_count >= 4:
        return price_rule.non_chinese_four_sub_price
    if non_chinese_count == 3:
        if is_old_student:
            return price_rule.non_chinese_discount_old
        return price_rule.non_chinese_discount_new
    return price_rule.non_chinese_base_price


def price_for_subject(subject: Subject, price_rule, non_chinese_price: float) -> float:
    if subject.is_independently_priced:
        return price_rule.chinese_price
    return non_chinese_price


def group_by_subject(records: Iterable) -> Dict[Subject, list]:
    grouped: Dict[Subject, list] = defaultdict(list)
    for record in records:
        grouped[Subject(record.subject)].append(record)
    return grouped


def calculate_settlement(
    student,
    records: Sequence,
    price_rule,
    period: Optional[str] = None,
) -> StudentSettlement:
    """
    Tính bảng quyết toán của một học sinh.

    `records` phải là các bản ghi của chính học sinh này, đã lọc theo kỳ cần tính.
    `period` (YYYY-MM) nên được truyền vào; nếu bỏ trống sẽ lấy tháng của bản ghi
    đầu tiên, hoặc tháng hiện tại khi không có bản ghi nào.
    """
    records = list(records)
    by_subject = group_by_subject(records)

    non_chinese_count = sum(1 for s in by_subject if not s.is_independently_priced)
    non_chinese_price = resolve_non_chinese_price(
        price_rule, non_chinese_count, bool(student.is_old_student)
    )

    items: List[SettlementItem] = []
    for subject, subject_records in by_subject.items():
        # Chỉ buổi có mặt mới tính giờ
        total_hours = sum(
            r.count for r in subject_records
            if AttendanceStatus(r.status) is AttendanceStatus.present
        )
        # Phí tài liệu tính một lần mỗi môn mỗi tháng: lấy giá trị lớn nhất
        material_fee_total = max([r.material_fee or 0 for r in subject_records] + [0])
        price_per_hour = price_for_subject(subject, price_rule, non_chinese_price)
        tuition_total = total_hours * price_per_hour

        items.append(SettlementItem(
            subject=subject,
            total_hours=total_hours,
            price_per_hour=price_per_hour,
            tuition_total=tuition_total,
            material_fee_total=material_fee_total,
            subtotal=tuition_total + material_fee_total,
        ))

    if period is None:
        period = period_label(records[0].record_date) if records else period_label(date.today())

    return StudentSettlement(
        student=StudentSchema.model_validate(student),
        items=items,
        total_amount=sum(item.subtotal for item in items),
        total_hours=sum(item.total_hours for item in items),
        period=period,
    )


def is_empty_settlement(settlement: StudentSettlement) -> bool:
    return settlement.total_amount == 0 and settlement.total_hours == 0


def filter_records_by_month(records: Iterable, year: int, month: int) -> list:
    return [
        r for r in records
        if r.record_date.year == year and r.record_date.month == month
    ]


def aggregate_period(students: Iterable, records: Iterable, price_rule, year: int, month: int):
    """
    Áp dụng `calculate_settlement` cho tất cả học sinh trong một tháng.

    Bản ghi được lọc theo tháng trước khi nhóm theo học sinh. Học sinh không có
    hoạt động (tổng tiền = 0 và tổng giờ = 0) bị loại khỏi kết quả.
    Trả về (danh sách quyết toán, tổng doanh thu).
    """
    label = f"{year:04d}-{month:02d}"
    records_by_student: Dict[int, list] = defaultdict(list)
    for record in filter_records_by_month(records, year, month):
        records_by_student[record.student_id].append(record)

    settlements = []
    for student in students:
        settlement = calculate_settlement(
            student, records_by_student.get(student.student_id, []), price_rule, period=label
        )
        if not is_empty_settlement(settlement):
            settlements.append(settlement)

    total_revenue = sum(s.total_amount for s in settlements)
    return settlements, total_revenue
