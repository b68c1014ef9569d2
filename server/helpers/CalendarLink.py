from datetime import timedelta
from urllib.parse import quote

GOOGLE_CALENDAR_BASE_URL = "https://www.google.com/calendar/render?action=TEMPLATE"

# Same set of characters encodeURIComponent leaves untouched
_SAFE_CHARS = "-_.!~*'()"


def _encode(value: str) -> str:
    return quote(value, safe=_SAFE_CHARS)


def google_calendar_url(competition) -> str:
    """Build an all-day Google Calendar event link for a competition"""
    start = competition.date
    end = start + timedelta(days=1)
    dates = f"{start.strftime('%Y%m%d')}/{end.strftime('%Y%m%d')}"
    details = _encode(f"{competition.description}\n\nLocation: {competition.location}")

    return (
        f"{GOOGLE_CALENDAR_BASE_URL}"
        f"&text={_encode(competition.name)}"
        f"&dates={dates}"
        f"&details={details}"
        f"&location={_encode(competition.location)}"
    )
