from fastapi import APIRouter, Depends

from database.DB import get_store
from database.exceptions import RosterError
from models.models import CommitteeMember, CommitteeConfig
from .dependencies import get_current_user, require_admin, roster_http_error

router = APIRouter()


@router.get('')
async def get_committee(user = Depends(get_current_user), store = Depends(get_store)):
    """Committee contacts and institutional addresses"""
    return store.committee


@router.put('/members/{member_id}')
async def update_member(member_id: str, member: CommitteeMember, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Update one committee member (Admin only)"""
    member.id = member_id
    try:
        updated = store.update_committee_member(member)
    except RosterError as e:
        raise roster_http_error(e)
    return {"message": "Committee member updated", "member": updated}


@router.put('/config')
async def update_config(config: CommitteeConfig, admin_user = Depends(require_admin), store = Depends(get_store)):
    """Update the technical and administrative addresses (Admin only)"""
    return {"message": "Committee configuration updated", "config": store.update_committee_config(config)}
