# app/schemas/settlement_schema.py
from typing import Dict, List
from pydantic import BaseModel
from app.models.subject_model import Subject
from app.schemas.student_schema import Student
from app.schemas.class_record_schema import ClassRecord


class SettlementItem(BaseModel):
    subject: Subject
    total_hours: float
    price_per_hour: float
    tuition_total: float
    material_fee_total: float
    subtotal: float


class StudentSettlement(BaseModel):
    student: Student
    items: List[SettlementItem]
    total_amount: float
    total_hours: float
    period: str  # YYYY-MM


class PeriodSettlement(BaseModel):
    year: int
    month: int
    period: str
    rule_id: int
    rule_name: str
    settlements: List[StudentSettlement]
    total_revenue: float


class SubjectSummary(BaseModel):
    revenue: float = 0
    hours: float = 0


class DashboardOverview(BaseModel):
    rule_id: int
    rule_name: str
    total_revenue: float
    total_hours: float
    student_count: int
    active_student_count: int
    by_subject: Dict[Subject, SubjectSummary]


class MonthlyAttendance(BaseModel):
    year: int
    month: int
    records: List[ClassRecord]
    # "YYYY-MM-DD" -> {subject: số bản ghi}
    calendar: Dict[str, Dict[Subject, int]]


class SubjectDetail(BaseModel):
    student_id: int
    subject: Subject
    period: str
    records: List[ClassRecord]
    billable_hours: float


class SummaryText(BaseModel):
    text: str
