from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime
from app.models.base_model import Base
from app.services.service_helper import get_utc_now

# Các trường giá, bị khóa khi is_locked = True
PRICE_FIELDS = (
    "chinese_price",
    "non_chinese_base_price",
    "non_chinese_discount_new",
    "non_chinese_discount_old",
    "non_chinese_four_sub_price",
)


class PriceRule(Base):
    """
    Mô hình database cho bảng `price_rules` (một phiên bản bảng giá).
    """
    __tablename__ = "price_rules"

    rule_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)
    is_locked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=get_utc_now, nullable=False)

    # Giá theo giờ của môn Ngữ văn
    chinese_price = Column(Float, nullable=False)
    # 1-2 môn không phải Ngữ văn
    non_chinese_base_price = Column(Float, nullable=False)
    # Đúng 3 môn: học viên mới / học viên cũ
    non_chinese_discount_new = Column(Float, nullable=False)
    non_chinese_discount_old = Column(Float, nullable=False)
    # Từ 4 môn trở lên
    non_chinese_four_sub_price = Column(Float, nullable=False)

    def __repr__(self):
        return (
            f"<PriceRule(rule_id={self.rule_id}, name='{self.name}', "
            f"is_active={self.is_active}, is_locked={self.is_locked})>"
        )
