from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """Thời điểm hiện tại theo UTC (có tzinfo)."""
    return datetime.now(timezone.utc)
