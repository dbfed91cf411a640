import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Lấy get_db và Base từ đúng nguồn
from app.api.deps import get_db
from app.database import Base
from app.models import *
from main import app

# Cấu hình SQLite In-Memory (DB ảo)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def reset_database():
    # Mỗi test chạy trên DB sạch
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    # Không dùng context manager để lifespan không chạm vào DB thật
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def default_rule(db):
    from app.services import price_rule_service
    return price_rule_service.seed_default_price_rule(db)
