
from .subject_model import Subject
from .student_model import Student
from .class_record_model import ClassRecord, AttendanceStatus
from .price_rule_model import PriceRule
