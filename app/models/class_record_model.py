import enum
from sqlalchemy import Column, Integer, String, Float, Date, Enum, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from app.models.base_model import Base
from app.models.subject_model import Subject


class AttendanceStatus(str, enum.Enum):
    present = "present"
    absent = "absent"


class ClassRecord(Base):
    """
    Một buổi học (điểm danh + số giờ) của một học sinh cho một môn vào một ngày.
    Mỗi bộ (student_id, subject, record_date) chỉ có tối đa một bản ghi.
    """
    __tablename__ = "class_records"
    __table_args__ = (
        UniqueConstraint("student_id", "subject", "record_date", name="uq_class_record_key"),
    )

    record_id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.student_id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(Enum(Subject, name="subject_enum"), nullable=False)
    record_date = Column(Date, nullable=False, index=True)
    count = Column(Float, nullable=False)
    status = Column(Enum(AttendanceStatus, name="attendance_status_enum"), default=AttendanceStatus.present, nullable=False)
    material_fee = Column(Float, default=0, nullable=False)
    teacher = Column(String(100), nullable=True)
    remarks = Column(Text, nullable=True)

    student = relationship("Student", back_populates="records")

    @property
    def key(self):
        return (self.student_id, self.subject, self.record_date)

    def __repr__(self):
        return (
            f"<ClassRecord(student_id={self.student_id}, subject={self.subject}, "
            f"date={self.record_date}, count={self.count}, status={self.status})>"
        )
