# app/schemas/price_rule_schema.py
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class PriceRuleBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["2024年标准价格体系"])
    chinese_price: float = Field(..., ge=0, allow_inf_nan=False, examples=[100])
    non_chinese_base_price: float = Field(..., ge=0, allow_inf_nan=False, examples=[85])
    non_chinese_discount_new: float = Field(..., ge=0, allow_inf_nan=False, examples=[76])
    non_chinese_discount_old: float = Field(..., ge=0, allow_inf_nan=False, examples=[72])
    non_chinese_four_sub_price: float = Field(..., ge=0, allow_inf_nan=False, examples=[72])


class PriceRuleCreate(PriceRuleBase):
    is_locked: bool = False


class PriceRule(PriceRuleBase):
    rule_id: int
    is_active: bool = False
    is_locked: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PriceRuleFieldUpdate(BaseModel):
    """Cập nhật một trường của bảng giá"""
    field: str
    value: Any


class PriceRuleClone(BaseModel):
    name: Optional[str] = None
