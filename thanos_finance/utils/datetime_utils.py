from datetime import datetime, date
from typing import Optional

import pytz

UTC = pytz.utc
SAO_PAULO_TZ = pytz.timezone("America/Sao_Paulo")

def now_utc() -> datetime:
    return datetime.now(UTC)

def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with a trailing Z, the stored transaction date format"""
    return now_utc().isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = UTC.localize(parsed)
    return parsed

def to_local(dt: datetime) -> datetime:
    return dt.astimezone(SAO_PAULO_TZ)

def format_date(dt: datetime, fmt: str = "%d/%m/%Y") -> str:
    return to_local(dt).strftime(fmt)

def parse_date(date_str: Optional[str]) -> Optional[date]:
    if not date_str:
        return None
    return date.fromisoformat(date_str[:10])
