from fastapi import APIRouter, Request, HTTPException, Depends
from fastapi.responses import RedirectResponse, JSONResponse
from authlib.integrations.starlette_client import OAuth, OAuthError
from pydantic import BaseModel
from typing import Optional

from config.config import GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET, FRONTEND_URL
from database.DB import get_store
from database.exceptions import RosterError, NotFound
from models.models import NotificationPreferences
from helpers.Statistics import dashboard_summary, rsvp_history
from .dependencies import get_current_user, session_payload, roster_http_error

router = APIRouter()

# OAuth configuration
oauth = OAuth()
oauth.register(
    name='google',
    client_id=GOOGLE_CLIENT_ID,
    client_secret=GOOGLE_CLIENT_SECRET,
    server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
    client_kwargs={'scope': 'openid email profile'}
)


# Pydantic models
class RegisterRequest(BaseModel):
    name: str
    email: str


class LoginRequest(BaseModel):
    email: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    profile_picture_url: Optional[str] = None


@router.post('/register')
async def register(payload: RegisterRequest, store = Depends(get_store)):
    """Self-registration; the account stays pending until an administrator approves it"""
    try:
        user = store.register_user(payload.name, payload.email)
    except RosterError as e:
        raise roster_http_error(e)

    return JSONResponse(status_code=201, content={
        "message": "Registration submitted. Your account is waiting for approval.",
        "user": user.model_dump(mode="json")
    })


@router.post('/login')
async def login(payload: LoginRequest, request: Request, store = Depends(get_store)):
    try:
        user = store.authenticate(payload.email)
    except NotFound:
        raise HTTPException(status_code=401, detail="User not found")
    except RosterError as e:
        raise roster_http_error(e)

    request.session.clear()
    request.session['user'] = session_payload(user)
    return {"message": "Signed in", "user": user}


@router.get('/login/google')
async def login_google(request: Request):
    if not GOOGLE_CLIENT_ID:
        raise HTTPException(status_code=503, detail="Google sign-in is not configured")
    redirect_uri = request.url_for('auth_google')
    return await oauth.google.authorize_redirect(request, redirect_uri)


@router.get('/auth/google')
async def auth_google(request: Request, store = Depends(get_store)):
    try:
        token = await oauth.google.authorize_access_token(request)
    except OAuthError as e:
        print(f"Google OAuth error: {e}")
        return JSONResponse(status_code=401, content={"error": "Authorization failed", "details": str(e)})

    userinfo = token.get('userinfo') or {}
    email = userinfo.get('email')
    if not email:
        return JSONResponse(status_code=401, content={"error": "Google account has no email address"})

    outcome, user = store.login_with_provider(email, userinfo.get('name'), userinfo.get('picture'))

    if outcome != "approved":
        return RedirectResponse(url=f"{FRONTEND_URL}/?status={outcome}", status_code=302)

    request.session.clear()
    request.session['user'] = session_payload(user)
    return RedirectResponse(url=f"{FRONTEND_URL}/", status_code=302)


@router.get('/health')
async def health_check():
    """Simple health check endpoint"""
    return JSONResponse(content={"status": "healthy", "message": "Server is running"})


@router.get('/user/profile')
async def user_profile(user = Depends(get_current_user)):
    return user


@router.put('/user/profile')
async def update_profile(payload: ProfileUpdate, request: Request, user = Depends(get_current_user), store = Depends(get_store)):
    try:
        updated = store.update_profile(user.id, payload.model_dump(exclude_unset=True))
    except RosterError as e:
        raise roster_http_error(e)

    request.session['user'] = session_payload(updated)
    return {"message": "Profile updated", "user": updated}


@router.put('/user/preferences')
async def update_preferences(preferences: NotificationPreferences, user = Depends(get_current_user), store = Depends(get_store)):
    updated = store.update_preferences(user.id, preferences)
    return {"message": "Preferences updated", "preferences": updated.preferences}


@router.get('/user/dashboard')
async def user_dashboard(user = Depends(get_current_user), store = Depends(get_store)):
    summary = dashboard_summary(user.id, store.competitions)
    summary["recent_notifications"] = store.notifications_for(user.id)[:2]
    return summary


@router.get('/user/rsvps')
async def user_rsvps(user = Depends(get_current_user), store = Depends(get_store)):
    return {"history": rsvp_history(user.id, store.competitions)}


@router.get('/logout')
async def logout(request: Request):
    request.session.pop('user', None)
    return RedirectResponse(url=FRONTEND_URL or "/")
