import logging
import math
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.crud import price_rule_crud
from app.exceptions import ProtectedRuleError, ValidationError
from app.models.price_rule_model import PriceRule, PRICE_FIELDS
from app.services.service_helper import get_utc_now

logger = logging.getLogger(__name__)

# Bảng giá mặc định khi database chưa có bảng giá nào
DEFAULT_PRICE_RULE = {
    "name": "2024年标准价格体系",
    "chinese_price": 100,
    "non_chinese_base_price": 85,
    "non_chinese_discount_new": 76,
    "non_chinese_discount_old": 72,
    "non_chinese_four_sub_price": 72,
}

STATUS_FIELDS = ("is_active", "is_locked")
EDITABLE_FIELDS = ("name",) + PRICE_FIELDS + STATUS_FIELDS


def seed_default_price_rule(db: Session) -> Optional[PriceRule]:
    """Tạo bảng giá mặc định (đang áp dụng, đã khóa) nếu chưa có bảng giá nào."""
    if price_rule_crud.get_all_price_rules(db):
        return None
    rule = PriceRule(**DEFAULT_PRICE_RULE, is_active=True, is_locked=True, created_at=get_utc_now())
    db.add(rule)
    db.commit()
    db.refresh(rule)
    logger.info(f"Seeded default price rule {rule.rule_id}")
    return rule


def resolve_default_rule(db: Session) -> Optional[PriceRule]:
    """Bảng giá đang áp dụng, nếu không có thì lấy bảng giá đầu tiên."""
    active = price_rule_crud.get_active_price_rule(db)
    if active:
        return active
    rules = price_rule_crud.get_all_price_rules(db)
    return rules[0] if rules else None


def resolve_rule(db: Session, rule_id: Optional[int] = None) -> Optional[PriceRule]:
    """Bảng giá được chọn; không chọn hoặc không tìm thấy thì dùng bảng giá mặc định."""
    if rule_id is not None:
        rule = price_rule_crud.get_price_rule(db, rule_id)
        if rule:
            return rule
    return resolve_default_rule(db)


def activate(db: Session, rule_id: int) -> Optional[PriceRule]:
    """
    Đặt một bảng giá làm bảng giá áp dụng duy nhất.
    Mọi bảng giá khác bị tắt trong cùng một lần commit.
    """
    target = price_rule_crud.get_price_rule(db, rule_id)
    if target is None:
        return None
    try:
        for rule in price_rule_crud.get_all_price_rules(db):
            rule.is_active = rule.rule_id == rule_id
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(target)
    logger.info(f"Price rule {rule_id} activated")
    return target


def _coerce_value(field: str, value: Any) -> Any:
    if field in STATUS_FIELDS:
        if not isinstance(value, bool):
            raise ValidationError(f"Trường '{field}' phải là true/false.")
        return value
    if field == "name":
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("Tên bảng giá không được để trống.")
        return value.strip()
    if isinstance(value, bool):
        raise ValidationError(f"Giá trị của '{field}' phải là số.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Giá trị của '{field}' phải là số.")
    if not math.isfinite(number):
        raise ValidationError(f"Giá trị của '{field}' phải là số hữu hạn.")
    if number < 0:
        raise ValidationError(f"Giá trị của '{field}' không được âm.")
    return number


def update_field(db: Session, rule_id: int, field: str, value: Any) -> Optional[PriceRule]:
    """
    Cập nhật một trường của bảng giá.
    Bảng giá đã khóa chỉ cho phép đổi is_active và is_locked.
    """
    rule = price_rule_crud.get_price_rule(db, rule_id)
    if rule is None:
        return None
    if field not in EDITABLE_FIELDS:
        raise ValidationError(f"Không thể cập nhật trường '{field}'.")
    if rule.is_locked and field not in STATUS_FIELDS:
        raise ProtectedRuleError("Bảng giá đang bị khóa, hãy mở khóa trước khi chỉnh sửa.")

    value = _coerce_value(field, value)
    if field == "is_active" and value:
        return activate(db, rule_id)

    setattr(rule, field, value)
    db.commit()
    db.refresh(rule)
    return rule


def delete(db: Session, rule_id: int) -> Optional[PriceRule]:
    """Xóa bảng giá. Không được xóa bảng giá đang áp dụng."""
    rule = price_rule_crud.get_price_rule(db, rule_id)
    if rule is None:
        return None
    if rule.is_active:
        raise ProtectedRuleError("Không thể xóa bảng giá đang áp dụng.")
    db.delete(rule)
    db.commit()
    logger.info(f"Price rule {rule_id} deleted")
    return rule


def fallback_selection(db: Session, selected_rule_id: Optional[int], deleted_rule_id: int) -> Optional[int]:
    """
    Bảng giá được chọn sau khi xóa: giữ nguyên nếu không phải bảng vừa xóa,
    ngược lại chọn bảng giá đầu tiên còn lại (hoặc None khi không còn bảng nào).
    """
    if selected_rule_id is not None and selected_rule_id != deleted_rule_id:
        return selected_rule_id
    rules = price_rule_crud.get_all_price_rules(db)
    return rules[0].rule_id if rules else None


def clone(db: Session, source_rule_id: int, name: Optional[str] = None) -> Optional[PriceRule]:
    """
    Tạo bảng giá mới từ bảng giá nguồn: sao chép các mức giá,
    luôn ở trạng thái chưa áp dụng và chưa khóa.
    """
    source = price_rule_crud.get_price_rule(db, source_rule_id)
    if source is None:
        return None
    new_rule = PriceRule(
        name=name or f"New price rule {date.today().isoformat()}",
        is_active=False,
        is_locked=False,
        created_at=get_utc_now(),
        **{field: getattr(source, field) for field in PRICE_FIELDS},
    )
    db.add(new_rule)
    db.commit()
    db.refresh(new_rule)
    logger.info(f"Price rule {new_rule.rule_id} cloned from {source_rule_id}")
    return new_rule
