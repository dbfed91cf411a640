# app/api/v1/endpoints/price_rule_route.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import price_rule_crud
from app.exceptions import ProtectedRuleError, ValidationError
from app.schemas import price_rule_schema
from app.services import price_rule_service
from app.services.service_helper import get_utc_now

router = APIRouter()

RULE_NOT_FOUND = "Không tìm thấy bảng giá."


@router.get(
    "/",
    response_model=List[price_rule_schema.PriceRule],
    summary="Lấy danh sách bảng giá",
)
def list_price_rules(db: Session = Depends(deps.get_db)):
    return price_rule_crud.get_all_price_rules(db)


@router.get(
    "/default",
    response_model=price_rule_schema.PriceRule,
    summary="Bảng giá mặc định (đang áp dụng hoặc bảng đầu tiên)",
)
def get_default_price_rule(db: Session = Depends(deps.get_db)):
    rule = price_rule_service.resolve_default_rule(db)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RULE_NOT_FOUND)
    return rule


@router.get(
    "/{rule_id}",
    response_model=price_rule_schema.PriceRule,
    summary="Lấy một bảng giá",
)
def get_price_rule(rule_id: int, db: Session = Depends(deps.get_db)):
    rule = price_rule_crud.get_price_rule(db, rule_id)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RULE_NOT_FOUND)
    return rule


@router.post(
    "/",
    response_model=price_rule_schema.PriceRule,
    status_code=status.HTTP_201_CREATED,
    summary="Tạo bảng giá mới",
)
def create_price_rule(
    rule_in: price_rule_schema.PriceRuleCreate,
    db: Session = Depends(deps.get_db)
):
    """
    Tạo bảng giá mới, luôn ở trạng thái chưa áp dụng.
    """
    return price_rule_crud.create_price_rule(db, rule_in)


@router.post(
    "/{rule_id}/clone",
    response_model=price_rule_schema.PriceRule,
    status_code=status.HTTP_201_CREATED,
    summary="Tạo phiên bản mới từ một bảng giá",
)
def clone_price_rule(
    rule_id: int,
    clone_in: Optional[price_rule_schema.PriceRuleClone] = None,
    db: Session = Depends(deps.get_db)
):
    rule = price_rule_service.clone(db, rule_id, name=clone_in.name if clone_in else None)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RULE_NOT_FOUND)
    return rule


@router.post(
    "/{rule_id}/activate",
    response_model=price_rule_schema.PriceRule,
    summary="Đặt bảng giá làm bảng giá áp dụng",
)
def activate_price_rule(rule_id: int, db: Session = Depends(deps.get_db)):
    rule = price_rule_service.activate(db, rule_id)
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RULE_NOT_FOUND)
    return rule


@router.patch(
    "/{rule_id}",
    response_model=price_rule_schema.PriceRule,
    summary="Cập nhật một trường của bảng giá",
)
def update_price_rule(
    rule_id: int,
    update_in: price_rule_schema.PriceRuleFieldUpdate,
    db: Session = Depends(deps.get_db)
):
    """
    Bảng giá đang khóa chỉ cho phép đổi `is_active` và `is_locked`.
    """
    try:
        rule = price_rule_service.update_field(db, rule_id, update_in.field, update_in.value)
    except ProtectedRuleError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RULE_NOT_FOUND)
    return rule


@router.delete(
    "/{rule_id}",
    response_model=dict,
    summary="Xóa bảng giá",
)
def delete_price_rule(
    rule_id: int,
    selected_rule_id: Optional[int] = None,
    db: Session = Depends(deps.get_db)
):
    """
    Xóa bảng giá (không được xóa bảng giá đang áp dụng).
    `selected_rule_id` là bảng giá đang được chọn ở phía client; kết quả trả về
    bảng giá nên chọn tiếp theo.
    """
    try:
        rule = price_rule_service.delete(db, rule_id)
    except ProtectedRuleError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=RULE_NOT_FOUND)

    return {
        "deleted_rule_id": rule_id,
        "selected_rule_id": price_rule_service.fallback_selection(db, selected_rule_id, rule_id),
        "deleted_at": get_utc_now().isoformat(),
        "status": "success"
    }
