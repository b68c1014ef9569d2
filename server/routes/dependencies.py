"""
Shared dependency functions for FastAPI routers.
Eliminates code duplication across multiple router files.
"""
from fastapi import Request, HTTPException, Depends

from database.DB import get_store
from database.exceptions import (
    RosterError, NotFound, DuplicateEmail, AccountPending, LastAdministrator, InvalidInput
)
from models.models import UserRole, UserStatus


def session_payload(user):
    """What is kept in the signed session cookie for a signed-in user"""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
    }


def roster_http_error(error: RosterError) -> HTTPException:
    """Translate a roster store failure into the matching HTTP error"""
    if isinstance(error, NotFound):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, DuplicateEmail):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, AccountPending):
        return HTTPException(status_code=403, detail=str(error))
    if isinstance(error, (LastAdministrator, InvalidInput)):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


async def get_current_user(request: Request, store = Depends(get_store)):
    """
    Dependency to get the currently authenticated user.
    The session only carries the user id; the record is always read from the
    store so deleted or demoted users lose access immediately.
    """
    session_user = request.session.get('user')
    if not session_user:
        raise HTTPException(status_code=401, detail="User not authenticated")

    try:
        user = store.get_user(session_user.get("id"))
    except NotFound:
        request.session.pop('user', None)
        raise HTTPException(status_code=401, detail="User not authenticated")

    if user.status == UserStatus.PENDING:
        raise HTTPException(status_code=403, detail="Account is pending approval by an administrator")
    return user


async def require_admin(user = Depends(get_current_user)):
    """
    Dependency to require the administrator role.
    Raises HTTPException if user is not an administrator.
    """
    if user.role != UserRole.ADMINISTRATOR:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
