from app.database import Base, engine, SessionLocal
from app.models import student_model, class_record_model, price_rule_model
from app.services import price_rule_service


def recreate_database():
    print("Đang xóa tất cả các bảng cơ sở dữ liệu...")
    # Xóa theo thứ tự ngược để bảng con bị xóa trước
    Base.metadata.drop_all(bind=engine)

    print("Đang tạo lại tất cả các bảng cơ sở dữ liệu...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        price_rule_service.seed_default_price_rule(db)
    finally:
        db.close()
    print("Cơ sở dữ liệu đã được tạo lại thành công!")

if __name__ == "__main__":
    recreate_database()
