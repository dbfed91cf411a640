# app/schemas/class_record_schema.py
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field
from app.models.subject_model import Subject
from app.models.class_record_model import AttendanceStatus


class ClassRecordBase(BaseModel):
    student_id: int
    subject: Subject
    record_date: date
    count: float = Field(..., gt=0, allow_inf_nan=False)
    status: AttendanceStatus = AttendanceStatus.present
    material_fee: float = Field(0, ge=0, allow_inf_nan=False)
    teacher: Optional[str] = None
    remarks: Optional[str] = None


class ClassRecordCreate(ClassRecordBase):
    """Schema để tạo một bản ghi buổi học"""
    pass


class ClassRecord(ClassRecordBase):
    """Schema để đọc dữ liệu trả về"""
    record_id: int

    class Config:
        from_attributes = True


# ---- Batch Schemas ----
class RecordDetails(BaseModel):
    """Các giá trị dùng chung cho mọi bản ghi trong một lần nhập"""
    count: float = Field(2, gt=0, allow_inf_nan=False)
    status: AttendanceStatus = AttendanceStatus.present
    material_fee: float = Field(0, ge=0, allow_inf_nan=False)
    teacher: Optional[str] = None
    remarks: Optional[str] = None


class StudentBatchCreate(RecordDetails):
    """Nhập theo học sinh: một học sinh x nhiều môn x nhiều ngày"""
    student_id: Optional[int] = None
    subjects: List[Subject] = Field(default_factory=list)
    dates: List[date] = Field(default_factory=list)


class SubjectBatchCreate(RecordDetails):
    """Nhập theo môn: một môn x nhiều học sinh x nhiều ngày"""
    subject: Optional[Subject] = None
    student_ids: List[int] = Field(default_factory=list)
    dates: List[date] = Field(default_factory=list)


class RecordBatchResult(BaseModel):
    created: int
    replaced: int
    records: List[ClassRecord]
