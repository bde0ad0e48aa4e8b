# app/utils/timeutil.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """当前 UTC 时间（naive，微秒精度），与 DateTime 列的存储方式一致。"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
