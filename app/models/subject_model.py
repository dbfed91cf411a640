# app/models/subject_model.py
import enum


class Subject(str, enum.Enum):
    """
    Danh sách môn học cố định của trung tâm.
    Ngữ văn (chinese) được tính giá riêng, các môn còn lại dùng chung bảng giá nhiều môn.
    """
    chinese = "chinese"
    math = "math"
    english = "english"
    physics = "physics"
    chemistry = "chemistry"

    @property
    def is_independently_priced(self) -> bool:
        return self is Subject.chinese
