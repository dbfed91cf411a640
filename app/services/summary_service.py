"""
Sinh văn bản bằng Gemini: tin nhắn gửi phụ huynh và phân tích doanh thu.

Lỗi từ dịch vụ bên ngoài không bao giờ được ném ra ngoài: hàm luôn trả về
một chuỗi, thay bằng thông báo mặc định khi gọi thất bại.
"""
import logging
from typing import List, Optional

import requests

from app import config
from app.schemas.settlement_schema import StudentSettlement

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "错误: 缺少 API Key 配置。"
PARENT_MESSAGE_EMPTY = "无法生成消息。"
PARENT_MESSAGE_FAILED = "生成消息失败，请检查 API 配置。"
ANALYSIS_MISSING_KEY = "未配置 API Key，无法使用分析功能。"
ANALYSIS_EMPTY = "暂无分析结果。"
ANALYSIS_FAILED = "分析失败。"


def _format_amount(value: float) -> str:
    return f"{value:g}"


def build_parent_prompt(settlement: StudentSettlement) -> str:
    details = "\n".join(
        f"- {item.subject.value}: {_format_amount(item.total_hours)} 课时 @ "
        f"¥{_format_amount(item.price_per_hour)}/课时 + 课本费: ¥{_format_amount(item.material_fee_total)}"
        for item in settlement.items
    )
    return (
        "Role: You are a polite and professional administrator at a tutoring center.\n"
        "Task: Write a short, friendly Wechat message to a parent detailing the tuition settlement for this month.\n\n"
        "Data:\n"
        f"Student: {settlement.student.name}\n"
        f"Month: {settlement.period}\n"
        f"Total Amount: ¥{_format_amount(settlement.total_amount)}\n"
        f"Details:\n{details}\n\n"
        "Instructions:\n"
        "- Start with a polite greeting.\n"
        "- Clearly state the total.\n"
        "- Briefly summarize the classes.\n"
        "- End with a thank you.\n"
        "- Language: Chinese (Simplified).\n"
        "- Keep it concise."
    )


def build_analysis_prompt(settlements: List[StudentSettlement]) -> str:
    summary = "\n".join(
        f"{s.student.name}: ¥{_format_amount(s.total_amount)} "
        f"({', '.join(item.subject.value for item in s.items)})"
        for s in settlements
    )
    return (
        "Analyze the following tuition data for a tutoring center.\n"
        "Identify:\n"
        "1. Top revenue generating subjects.\n"
        "2. Any students with unusually high or low hours.\n"
        "3. A brief strategic tip for next month.\n\n"
        f"Data:\n{summary}\n\n"
        "Output Language: Chinese (Simplified).\n"
        "Output as a Markdown formatted list."
    )


def generate_content(prompt: str) -> Optional[str]:
    """
    Gọi Gemini generateContent. Trả về văn bản, hoặc None khi phản hồi rỗng.
    Ném requests.RequestException / ValueError khi gọi thất bại.
    """
    url = config.GEMINI_API_URL.format(model=config.GEMINI_MODEL)
    payload = {"contents": [{"parts": [{"text": prompt}]}]}
    response = requests.post(
        url,
        params={"key": config.GEMINI_API_KEY},
        json=payload,
        timeout=config.GEMINI_TIMEOUT,
    )
    response.raise_for_status()
    data = response.json()

    candidates = data.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts).strip()
    return text or None


def _run(prompt: str, missing_key: str, empty: str, failed: str) -> str:
    if not config.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY not found in environment variables.")
        return missing_key
    try:
        return generate_content(prompt) or empty
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Gemini request failed: {e}", exc_info=True)
        return failed


def generate_parent_message(settlement: StudentSettlement) -> str:
    """Tin nhắn WeChat gửi phụ huynh về học phí tháng."""
    return _run(
        build_parent_prompt(settlement),
        MISSING_KEY_MESSAGE,
        PARENT_MESSAGE_EMPTY,
        PARENT_MESSAGE_FAILED,
    )


def analyze_financials(settlements: List[StudentSettlement]) -> str:
    """Phân tích doanh thu của một kỳ quyết toán."""
    return _run(
        build_analysis_prompt(settlements),
        ANALYSIS_MISSING_KEY,
        ANALYSIS_EMPTY,
        ANALYSIS_FAILED,
    )
