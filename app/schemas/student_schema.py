# app/schemas/student_schema.py
from typing import List, Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from app.models.subject_model import Subject


class StudentBase(BaseModel):
    name: str = Field(..., min_length=1, examples=["刘爱丽"])
    grade: str = Field(..., min_length=1, examples=["初二"])
    phone: str = Field(..., min_length=1, examples=["13800138000"])
    wechat: Optional[str] = None
    is_old_student: bool = False
    subjects: List[Subject] = Field(default_factory=list)
    remarks: Optional[str] = None

    @field_validator("subjects")
    @classmethod
    def dedupe_subjects(cls, value: List[Subject]) -> List[Subject]:
        # giữ thứ tự, bỏ môn trùng
        return list(dict.fromkeys(value))


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    grade: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)
    wechat: Optional[str] = None
    is_old_student: Optional[bool] = None
    subjects: Optional[List[Subject]] = None
    remarks: Optional[str] = None

    @field_validator("name", "grade", "phone", "is_old_student", "subjects")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        # Có thể bỏ qua trường, nhưng không được gửi null cho trường bắt buộc
        if value is None:
            raise ValueError(f"{info.field_name} không được để trống.")
        return value

    @field_validator("subjects")
    @classmethod
    def dedupe_subjects(cls, value: List[Subject]) -> List[Subject]:
        return list(dict.fromkeys(value))


class Student(StudentBase):
    student_id: int

    class Config:
        from_attributes = True
