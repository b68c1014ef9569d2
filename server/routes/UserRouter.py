from fastapi import APIRouter, HTTPException, Depends, Query
from typing import Optional
from pydantic import BaseModel

from database.DB import get_store
from database.exceptions import RosterError
from models.models import UserRole
from helpers.Statistics import referee_attendance, competition_seasons, paginate
from .dependencies import require_admin, roster_http_error

router = APIRouter()


# Pydantic models
class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class RoleChange(BaseModel):
    role: UserRole


@router.get('')
async def get_users(
    page: Optional[int] = Query(None, ge=1),
    per_page: int = Query(5, ge=1, le=100),
    admin_user = Depends(require_admin),
    store = Depends(get_store)
):
    """Get all users (Admin only)"""
    if page is None:
        return {"users": store.users}

    result = paginate(store.users, page, per_page)
    return {"users": result.pop("items"), **result}


@router.get('/statistics')
async def get_statistics(season: Optional[int] = Query(None), admin_user = Depends(require_admin), store = Depends(get_store)):
    """Per-referee attendance percentages by season (Admin only)"""
    return {
        "seasons": competition_seasons(store.competitions),
        "referees": referee_attendance(store.competitions, store.users, season=season),
    }


@router.post('/{user_id}/approve')
async def approve_user(user_id: str, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Approve a pending registration (Admin only)"""
    try:
        user = store.approve_user(user_id)
    except RosterError as e:
        raise roster_http_error(e)
    return {"message": "User approved successfully", "user": user}


@router.put('/{user_id}')
async def update_user(user_id: str, payload: UserUpdate, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Edit a user's name or email (Admin only)"""
    try:
        user = store.update_user(user_id, name=payload.name, email=payload.email)
    except RosterError as e:
        raise roster_http_error(e)
    return {"message": "User updated successfully", "user": user}


@router.put('/{user_id}/role')
async def change_role(user_id: str, payload: RoleChange, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Promote or demote a user (Admin only); the last administrator cannot be demoted"""
    try:
        user = store.change_role(user_id, payload.role)
    except RosterError as e:
        raise roster_http_error(e)
    return {"message": "Role updated successfully", "user": user}


@router.delete('/{user_id}')
async def delete_user(user_id: str, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Remove a user and their RSVPs (Admin only)"""
    if user_id == admin_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    store.delete_user(user_id)
    return {"message": "User removed successfully"}
