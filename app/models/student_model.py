from sqlalchemy import Column, Integer, String, Boolean, JSON, Text
from sqlalchemy.orm import relationship
from app.models.base_model import Base


class Student(Base):
    """
    Model cho bảng students.
    """
    __tablename__ = 'students'

    student_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    grade = Column(String(50), nullable=False)
    phone = Column(String(30), nullable=False)
    wechat = Column(String(100), nullable=True)
    # Học viên cũ được hưởng mức giảm riêng khi học đúng 3 môn
    is_old_student = Column(Boolean, default=False, nullable=False)
    # Danh sách giá trị Subject đã đăng ký
    subjects = Column(JSON, default=list, nullable=False)
    remarks = Column(Text, nullable=True)

    records = relationship(
        "ClassRecord",
        back_populates="student",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Student(student_id={self.student_id}, name='{self.name}')>"
