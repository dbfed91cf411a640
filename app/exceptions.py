# app/exceptions.py


class ValidationError(ValueError):
    """Dữ liệu nhập thiếu hoặc sai, bị từ chối trước khi ghi vào database."""


class ProtectedRuleError(ValueError):
    """Thao tác bị chặn trên bảng giá đang áp dụng hoặc đang khóa."""
