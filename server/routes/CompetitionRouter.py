from fastapi import APIRouter, HTTPException, Depends, Query, UploadFile, File
from fastapi.responses import JSONResponse, Response
from fastapi.encoders import jsonable_encoder
from typing import Optional
from urllib.parse import quote
from pydantic import BaseModel

from config.config import GEMINI_API_KEY, GEMINI_MODEL, GEMINI_TIMEOUT_SECONDS
from database.DB import get_store
from database.exceptions import RosterError
from models.models import CompetitionInput, RSVPStatus
from helpers.BriefingGenerator import generate_briefing
from helpers.CalendarLink import google_calendar_url
from helpers.DocumentContent import read_upload, decode_data_url, format_bytes
from helpers.Statistics import competition_seasons, paginate
from .dependencies import get_current_user, require_admin, roster_http_error

router = APIRouter()


# Pydantic models
class RSVPRequest(BaseModel):
    status: RSVPStatus
    comment: str = ""


def _document_summary(document):
    return {
        "id": document.id,
        "name": document.name,
        "type": document.type,
        "size": document.size,
        "size_label": format_bytes(document.size),
        "timestamp": document.timestamp,
    }


def _content_disposition(filename):
    # latin-1 only in headers: ASCII fallback plus the RFC 5987 UTF-8 form
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "'").replace("\\", "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get('')
async def list_competitions(
    search: Optional[str] = Query(None),
    season: Optional[int] = Query(None),
    page: Optional[int] = Query(None, ge=1),
    per_page: int = Query(5, ge=1, le=100),
    user = Depends(get_current_user),
    store = Depends(get_store)
):
    """List competitions, newest first, optionally filtered by name and season"""
    competitions = store.list_competitions(search=search, season=season)
    response = {"seasons": competition_seasons(store.competitions)}

    if page is None:
        response["competitions"] = competitions
        return response

    result = paginate(competitions, page, per_page)
    response["competitions"] = result.pop("items")
    response.update(result)
    return response


@router.get('/{competition_id}')
async def get_competition(competition_id: str, user = Depends(get_current_user), store = Depends(get_store)):
    try:
        competition = store.get_competition(competition_id)
    except RosterError as e:
        raise roster_http_error(e)
    return {"competition": competition, "my_rsvp": competition.rsvp_for(user.id)}


@router.post('')
async def create_competition(data: CompetitionInput, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Create a new competition (Admin only)"""
    competition = store.save_competition(data, actor_name=admin_user.name)
    return JSONResponse(status_code=201, content={
        "message": "Competition created successfully",
        "competition": competition.model_dump(mode="json")
    })


@router.put('/{competition_id}')
async def update_competition(competition_id: str, data: CompetitionInput, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Create or replace a competition's editable fields (Admin only)"""
    data.id = competition_id
    competition = store.save_competition(data, actor_name=admin_user.name)
    return {"message": "Competition saved successfully", "competition": competition}


@router.delete('/{competition_id}')
async def delete_competition(competition_id: str, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Delete a competition (Admin only); deleting a missing id succeeds"""
    store.delete_competition(competition_id)
    return {"message": "Competition deleted successfully"}


@router.post('/{competition_id}/payment')
async def toggle_payment(competition_id: str, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Flip the paid flag and log who did it (Admin only)"""
    try:
        competition = store.toggle_payment(competition_id, admin_user.name)
    except RosterError as e:
        raise roster_http_error(e)
    return {"message": "Payment status updated", "competition": competition}


@router.post('/{competition_id}/rsvp')
async def submit_rsvp(competition_id: str, payload: RSVPRequest, user = Depends(get_current_user), store = Depends(get_store)):
    try:
        rsvp = store.submit_rsvp(user.id, competition_id, payload.status, payload.comment)
    except RosterError as e:
        raise roster_http_error(e)
    return {"message": "Response recorded", "rsvp": rsvp}


@router.get('/{competition_id}/documents')
async def list_documents(competition_id: str, user = Depends(get_current_user), store = Depends(get_store)):
    try:
        competition = store.get_competition(competition_id)
    except RosterError as e:
        raise roster_http_error(e)
    return {"documents": [_document_summary(d) for d in competition.documents]}


@router.post('/{competition_id}/documents')
async def upload_document(competition_id: str, file: UploadFile = File(...), admin_user = Depends(require_admin), store = Depends(get_store)):
    """Attach a document to a competition (Admin only)"""
    try:
        store.get_competition(competition_id)
    except RosterError as e:
        raise roster_http_error(e)

    try:
        content_type, size, content_ref = await read_upload(file)
    except OSError as e:
        print(f"Error reading upload '{file.filename}': {e}")
        raise HTTPException(status_code=500, detail="Failed to read the uploaded document")

    try:
        document = store.upload_document(competition_id, file.filename or "document", content_type, size, content_ref)
    except RosterError as e:
        raise roster_http_error(e)

    return JSONResponse(status_code=201, content={
        "message": "Document uploaded successfully",
        "document": jsonable_encoder(_document_summary(document))
    })


@router.get('/{competition_id}/documents/{document_id}')
async def download_document(competition_id: str, document_id: str, user = Depends(get_current_user), store = Depends(get_store)):
    try:
        document = store.get_document(competition_id, document_id)
        content_type, data = decode_data_url(document.url)
    except RosterError as e:
        raise roster_http_error(e)

    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": _content_disposition(document.name)}
    )


@router.delete('/{competition_id}/documents/{document_id}')
async def delete_document(competition_id: str, document_id: str, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Remove a document (Admin only); removing a missing document succeeds"""
    store.delete_document(competition_id, document_id)
    return {"message": "Document deleted successfully"}


@router.get('/{competition_id}/calendar')
async def calendar_link(competition_id: str, user = Depends(get_current_user), store = Depends(get_store)):
    try:
        competition = store.get_competition(competition_id)
    except RosterError as e:
        raise roster_http_error(e)
    return {"url": google_calendar_url(competition)}


@router.post('/{competition_id}/briefing')
async def competition_briefing(competition_id: str, user = Depends(get_current_user), store = Depends(get_store)):
    """Generate the officials' briefing for the confirmed roster of a competition"""
    try:
        competition = store.get_competition(competition_id)
    except RosterError as e:
        raise roster_http_error(e)

    attending = set(competition.attending_user_ids())
    attendees = [u for u in store.users if u.id in attending]

    status_code, payload = await generate_briefing(
        competition, attendees, GEMINI_API_KEY, GEMINI_MODEL, timeout=GEMINI_TIMEOUT_SECONDS
    )
    return JSONResponse(status_code=status_code, content=payload)
