# app/api/v1/api.py
from fastapi import APIRouter

# --- Import các routers ---
from app.api.v1.endpoints.student_route import router as student_router
from app.api.v1.endpoints.record_route import router as record_router
from app.api.v1.endpoints.price_rule_route import router as price_rule_router
from app.api.v1.endpoints.settlement_route import router as settlement_router

api_router = APIRouter()

# --- Bao gồm các routers vào router chính ---
api_router.include_router(student_router, prefix="/students", tags=["Students"])
api_router.include_router(record_router, prefix="/records", tags=["Class Records"])
api_router.include_router(price_rule_router, prefix="/price_rules", tags=["Price Rules"])
api_router.include_router(settlement_router, prefix="/settlements", tags=["Settlements"])
