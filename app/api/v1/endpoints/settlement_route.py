# app/api/v1/endpoints/settlement_route.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api import deps
from app.models.subject_model import Subject
from app.schemas.settlement_schema import (
    DashboardOverview,
    PeriodSettlement,
    StudentSettlement,
    SubjectDetail,
    SummaryText,
)
from app.services import settlement_service, summary_service
from app.services.excel_services import export_settlement

router = APIRouter()

NO_PRICE_RULE = "Chưa có bảng giá nào."


def _settle_period_or_404(db: Session, year: int, month: int, rule_id: Optional[int]) -> PeriodSettlement:
    period = settlement_service.settle_period(db, year, month, rule_id=rule_id)
    if period is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NO_PRICE_RULE)
    return period


@router.get(
    "/",
    response_model=PeriodSettlement,
    summary="Quyết toán học phí theo tháng",
)
def get_period_settlement(
    year: int = Query(..., ge=1900),
    month: int = Query(..., ge=1, le=12),
    rule_id: Optional[int] = None,
    db: Session = Depends(deps.get_db)
):
    """
    Quyết toán tất cả học sinh có hoạt động trong tháng.
    Không truyền `rule_id` thì dùng bảng giá đang áp dụng.
    """
    return _settle_period_or_404(db, year, month, rule_id)


@router.get(
    "/dashboard",
    response_model=DashboardOverview,
    summary="Tổng quan doanh thu toàn thời gian",
)
def get_dashboard(db: Session = Depends(deps.get_db)):
    overview = settlement_service.get_dashboard_overview(db)
    if overview is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NO_PRICE_RULE)
    return overview


@router.get(
    "/export",
    summary="Xuất quyết toán tháng ra CSV hoặc Excel",
)
def export_period_settlement(
    year: int = Query(..., ge=1900),
    month: int = Query(..., ge=1, le=12),
    rule_id: Optional[int] = None,
    file_format: Literal["csv", "xlsx"] = Query("csv", alias="format"),
    db: Session = Depends(deps.get_db)
):
    period = _settle_period_or_404(db, year, month, rule_id)
    if file_format == "xlsx":
        return export_settlement.export_settlement_excel(period)
    return export_settlement.export_settlement_csv(period)


@router.post(
    "/analysis",
    response_model=SummaryText,
    summary="Phân tích doanh thu tháng bằng AI",
)
def analyze_period(
    year: int = Query(..., ge=1900),
    month: int = Query(..., ge=1, le=12),
    rule_id: Optional[int] = None,
    db: Session = Depends(deps.get_db)
):
    period = _settle_period_or_404(db, year, month, rule_id)
    return SummaryText(text=summary_service.analyze_financials(period.settlements))


@router.get(
    "/students/{student_id}",
    response_model=StudentSettlement,
    summary="Quyết toán của một học sinh trong tháng",
)
def get_student_settlement(
    student_id: int,
    year: int = Query(..., ge=1900),
    month: int = Query(..., ge=1, le=12),
    rule_id: Optional[int] = None,
    db: Session = Depends(deps.get_db)
):
    settlement = settlement_service.settle_student(db, student_id, year, month, rule_id=rule_id)
    if settlement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Không tìm thấy học sinh hoặc bảng giá.")
    return settlement


@router.get(
    "/students/{student_id}/subjects/{subject}",
    response_model=SubjectDetail,
    summary="Chi tiết các buổi học của một môn trong tháng",
)
def get_subject_detail(
    student_id: int,
    subject: Subject,
    year: int = Query(..., ge=1900),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(deps.get_db)
):
    return settlement_service.get_subject_detail(db, student_id, subject, year, month)


@router.post(
    "/students/{student_id}/parent_message",
    response_model=SummaryText,
    summary="Soạn tin nhắn học phí gửi phụ huynh bằng AI",
)
def create_parent_message(
    student_id: int,
    year: int = Query(..., ge=1900),
    month: int = Query(..., ge=1, le=12),
    rule_id: Optional[int] = None,
    db: Session = Depends(deps.get_db)
):
    settlement = settlement_service.settle_student(db, student_id, year, month, rule_id=rule_id)
    if settlement is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Không tìm thấy học sinh hoặc bảng giá.")
    return SummaryText(text=summary_service.generate_parent_message(settlement))
