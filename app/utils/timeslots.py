import re
from typing import Optional

DAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}

_TIME_PAT = re.compile(r"^(\d{1,2}):(\d{2})$")


def normalize_time(value: Optional[str]) -> Optional[str]:
    """
    "8:00" -> "08:00", "08:00" -> "08:00", "" / None -> None

    Fixed-width HH:MM keeps string comparison chronological.
    Raises ValueError on anything that is not a 24h wall-clock time.
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    m = _TIME_PAT.match(s)
    if not m:
        raise ValueError(f"invalid time '{value}', expected HH:MM")
    hh, mm = int(m.group(1)), int(m.group(2))
    if hh > 23 or mm > 59:
        raise ValueError(f"invalid time '{value}', expected HH:MM")
    return f"{hh:02d}:{mm:02d}"


def day_label(day_of_week: int) -> str:
    return DAY_NAMES.get(day_of_week, str(day_of_week))
