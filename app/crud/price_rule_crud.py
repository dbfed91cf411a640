from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.price_rule_model import PriceRule
from app.schemas.price_rule_schema import PriceRuleCreate


def get_price_rule(db: Session, rule_id: int) -> Optional[PriceRule]:
    """Lấy bảng giá theo ID."""
    return db.query(PriceRule).filter(PriceRule.rule_id == rule_id).first()


def get_all_price_rules(db: Session) -> List[PriceRule]:
    """Lấy tất cả bảng giá theo thứ tự tạo."""
    return db.query(PriceRule).order_by(PriceRule.rule_id).all()


def get_active_price_rule(db: Session) -> Optional[PriceRule]:
    return db.query(PriceRule).filter(PriceRule.is_active.is_(True)).order_by(PriceRule.rule_id).first()


def create_price_rule(db: Session, rule_in: PriceRuleCreate) -> PriceRule:
    db_rule = PriceRule(**rule_in.model_dump(), is_active=False)
    db.add(db_rule)
    db.commit()
    db.refresh(db_rule)
    return db_rule
