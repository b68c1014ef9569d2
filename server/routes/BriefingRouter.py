from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from config.config import GEMINI_API_KEY, GEMINI_MODEL, GEMINI_TIMEOUT_SECONDS
from helpers.BriefingGenerator import generate_briefing

router = APIRouter()


@router.post('/generate-briefing')
async def generate(request: Request):
    """
    Standalone briefing endpoint taking ``{"competition": {...}, "attendees": [...]}``.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    competition = body.get("competition") if isinstance(body, dict) else None
    attendees = body.get("attendees") if isinstance(body, dict) else None
    if not competition or attendees is None:
        return JSONResponse(status_code=400, content={"error": "Competition data missing from the request."})

    status_code, payload = await generate_briefing(
        competition, attendees, GEMINI_API_KEY, GEMINI_MODEL, timeout=GEMINI_TIMEOUT_SECONDS
    )
    return JSONResponse(status_code=status_code, content=payload)


@router.api_route('/generate-briefing', methods=["GET", "PUT", "PATCH", "DELETE"])
async def generate_wrong_method():
    return JSONResponse(status_code=405, content={"error": "Method Not Allowed"})
