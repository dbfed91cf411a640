# main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.api import api_router
from app.config import CORS_ORIGINS
from app.database import Base, engine, SessionLocal
from app.models import *
from app.services import price_rule_service
import logging

# Cấu hình logging cho toàn ứng dụng
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def seed_default_data():
    """Tạo bảng giá mặc định nếu database chưa có bảng giá nào."""
    db = SessionLocal()
    try:
        price_rule_service.seed_default_price_rule(db)
    finally:
        db.close()


# Hàm lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tạo tất cả các bảng trong cơ sở dữ liệu
    Base.metadata.create_all(bind=engine)
    seed_default_data()
    logger.info("Database đã sẵn sàng.")

    yield # Điểm này ứng dụng sẽ chạy

    logger.info("Ứng dụng đã tắt.")

# Khởi tạo ứng dụng FastAPI với lifespan handler
app = FastAPI(
    title="Tuition Settlement API",
    description="API quản lý học sinh, buổi học, bảng giá và quyết toán học phí.",
    version="1.0.0",
    lifespan=lifespan
)

# Cấu hình CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Bao gồm router chính của API v1
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
def read_root():
    return {"message": "Welcome to the Tuition Settlement API! Visit /docs for API documentation."}
