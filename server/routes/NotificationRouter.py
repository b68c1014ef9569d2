from fastapi import APIRouter, HTTPException, Depends, Query

from database.DB import get_store
from database.exceptions import RosterError
from helpers.NotificationGate import pending_alerts
from .dependencies import get_current_user, roster_http_error

router = APIRouter()


@router.get('')
async def get_notifications(user = Depends(get_current_user), store = Depends(get_store)):
    """The signed-in user's feed, most recent first"""
    notifications = store.notifications_for(user.id)
    return {
        "notifications": notifications,
        "unread_count": sum(1 for n in notifications if not n.is_read),
    }


@router.get('/alerts')
async def get_alerts(channel: str = Query("toast", pattern="^(toast|email)$"), user = Depends(get_current_user), store = Depends(get_store)):
    """Unread notifications the user's preferences allow to surface on a channel"""
    return {"alerts": pending_alerts(user.preferences, store.notifications_for(user.id), channel)}


@router.post('/read-all')
async def mark_all_read(user = Depends(get_current_user), store = Depends(get_store)):
    store.mark_all_read_for_user(user.id)
    return {"message": "All notifications marked as read"}


@router.post('/{notification_id}/read')
async def mark_read(notification_id: str, user = Depends(get_current_user), store = Depends(get_store)):
    if not any(n.id == notification_id for n in store.notifications_for(user.id)):
        raise HTTPException(status_code=404, detail="Notification not found")
    try:
        store.mark_read(notification_id)
    except RosterError as e:
        raise roster_http_error(e)
    return {"message": "Notification marked as read"}
