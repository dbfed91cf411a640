from dotenv import load_dotenv
import os


load_dotenv(dotenv_path="credentials.env")
load_dotenv()

# Mặc định dùng SQLite cục bộ, có thể trỏ sang Postgres qua biến môi trường
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tuition.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Gemini dùng cho các bản tóm tắt văn bản (tin nhắn phụ huynh, phân tích doanh thu)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
)
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost,http://localhost:3000").split(",")
    if origin.strip()
]
