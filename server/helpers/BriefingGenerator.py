"""
Officials' briefing text generated by the Gemini API.

The result is advisory text only. Every failure is reported back as an
HTTP status plus an ``{"error": ...}`` payload so callers never have to
handle an exception from here.
"""
from datetime import date

import httpx

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"


def _field(source, name, default=""):
    if isinstance(source, dict):
        return source.get(name) or default
    return getattr(source, name, None) or default


def _format_date(value):
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return value
    if hasattr(value, "strftime"):
        return value.strftime("%A, %d %B %Y")
    return str(value)


def build_briefing_prompt(competition, attendees) -> str:
    name = _field(competition, "name")
    responsible = _field(competition, "cra_responsible", "Not assigned")
    level = _field(competition, "level")
    pool_type = _field(competition, "pool_type")
    attendee_names = ", ".join(_field(a, "name") for a in attendees) if attendees else "No referees confirmed yet"

    return f"""
Act as an experienced and professional swimming meet director. Your task is to write a detailed
briefing for the officials of a competition. The text must be clear, concise, well structured and
formatted as Markdown.

**Competition details:**
- **Name:** {name}
- **Date:** {_format_date(_field(competition, "date"))}
- **Location:** {_field(competition, "location")}
- **Description:** {_field(competition, "description")}
- **Level:** {getattr(level, "value", level)}
- **Pool:** {getattr(pool_type, "value", pool_type)}
- **Committee official in charge:** {responsible}

**Confirmed referees:**
- {attendee_names}

**Briefing structure (follow it):**

### Briefing for the competition: {name}

**1. Welcome and introduction**
- Greet the officiating team and thank them for attending.
- Briefly present the importance and level of the competition.
- Mention the committee official in charge: {responsible}.

**2. Key times**
- Officials' meeting (suggest a time, for example 45 minutes before the start).
- Warm-up start.
- Session start.
- Planned breaks (if any).

**3. Roles and positions**
- Suggest an initial assignment of roles for the confirmed referees (starter, turn judge, timekeeper, etc.).
- If no referees are confirmed, say that roles will be assigned at the meeting.
- Stress communication and position rotation, if planned.

**4. Focus points and specific rules**
- Mention specific rules or points of attention for this competition (starts, turns, common disqualifications).
- Cover the start procedure and the importance of punctuality.

**5. Procedures and logistics**
- Where the officials' meeting takes place.
- Food and hydration.
- Dress code.

**6. Closing remarks**
- Wish everyone an excellent competition.
- Encourage teamwork and professionalism.

Please write the complete briefing from this information.
"""


def _extract_text(payload) -> str:
    parts = []
    for candidate in payload.get("candidates") or []:
        content = candidate.get("content") or {}
        for part in content.get("parts") or []:
            if part.get("text"):
                parts.append(part["text"])
        if parts:
            break
    return "".join(parts).strip()


async def generate_briefing(competition, attendees, api_key, model, client=None, timeout=60.0):
    """Returns (status_code, payload) where payload is {"briefing": ...} or {"error": ...}"""
    if not api_key:
        print("GEMINI_API_KEY is not set, briefing generation unavailable")
        return 500, {"error": "Server configuration incomplete: missing API key."}

    url = f"{GEMINI_API_BASE}/{model}:generateContent"
    body = {"contents": [{"parts": [{"text": build_briefing_prompt(competition, attendees)}]}]}
    headers = {"x-goog-api-key": api_key, "Content-Type": "application/json"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.post(url, json=body, headers=headers)
        else:
            response = await client.post(url, json=body, headers=headers)

        if response.status_code != 200:
            print(f"Gemini request failed ({response.status_code}): {response.text}")
            return 500, {"error": "The server failed to generate the briefing."}

        text = _extract_text(response.json())
    except (httpx.HTTPError, ValueError) as e:
        print(f"Error calling the Gemini API: {e}")
        return 500, {"error": "The server failed to generate the briefing."}

    if not text:
        return 500, {"error": "The AI response was empty."}
    return 200, {"briefing": text}
