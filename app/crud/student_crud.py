from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.student_model import Student
from app.models.subject_model import Subject
from app.schemas.student_schema import StudentCreate, StudentUpdate


def get_student(db: Session, student_id: int) -> Optional[Student]:
    """Lấy thông tin học sinh theo ID."""
    return db.query(Student).filter(Student.student_id == student_id).first()


def get_students_by_ids(db: Session, student_ids: List[int]) -> List[Student]:
    if not student_ids:
        return []
    return db.query(Student).filter(Student.student_id.in_(student_ids)).all()


def get_all_students(
    db: Session,
    grade: Optional[str] = None,
    subject: Optional[Subject] = None,
    skip: int = 0,
    limit: Optional[int] = 100,
) -> List[Student]:
    """Lấy danh sách học sinh, lọc theo lớp và môn đã đăng ký."""
    query = db.query(Student)
    if grade:
        query = query.filter(Student.grade == grade)
    students = query.order_by(Student.student_id).all()
    # subjects lưu dạng JSON nên lọc phía Python
    if subject is not None:
        students = [s for s in students if subject.value in (s.subjects or [])]
    if limit is None:
        return students[skip:]
    return students[skip: skip + limit]


def _dump(data: dict) -> dict:
    if "subjects" in data and data["subjects"] is not None:
        data["subjects"] = [Subject(s).value for s in data["subjects"]]
    return data


def create_student(db: Session, student_in: StudentCreate) -> Student:
    db_student = Student(**_dump(student_in.model_dump()))
    db.add(db_student)
    db.commit()
    db.refresh(db_student)
    return db_student


def update_student(db: Session, db_obj: Student, obj_in: StudentUpdate) -> Student:
    update_data = _dump(obj_in.model_dump(exclude_unset=True))
    for key, value in update_data.items():
        setattr(db_obj, key, value)
    db.add(db_obj)
    db.commit()
    db.refresh(db_obj)
    return db_obj


def delete_student(db: Session, db_obj: Student) -> Student:
    db.delete(db_obj)
    db.commit()
    return db_obj
