import math
from datetime import date
from typing import List, Optional

from models.models import UserRole, RSVPStatus


def competition_seasons(competitions) -> List[int]:
    """Distinct competition years, newest first"""
    return sorted({c.date.year for c in competitions}, reverse=True)


def _has_attending(competition, user_id):
    return any(r.user_id == user_id and r.status == RSVPStatus.ATTENDING for r in competition.rsvps)


def referee_attendance(competitions, users, season: Optional[int] = None) -> List[dict]:
    """
    Per-referee attendance for every season: how many of the season's
    competitions the referee confirmed and the rounded percentage.
    """
    seasons = competition_seasons(competitions)
    referees = [u for u in users if u.role == UserRole.REFEREE]

    stats = []
    for referee in referees:
        seasonal = []
        for year in seasons:
            if season is not None and year != season:
                continue
            in_season = [c for c in competitions if c.date.year == year]
            attended = sum(1 for c in in_season if _has_attending(c, referee.id))
            seasonal.append({
                "season": year,
                "attended": attended,
                "total": len(in_season),
                # half-up, not banker's rounding
                "percentage": math.floor(attended * 100 / len(in_season) + 0.5) if in_season else 0,
            })
        if season is not None and not seasonal:
            continue
        stats.append({
            "referee_id": referee.id,
            "referee_name": referee.name,
            "seasonal_stats": seasonal,
        })
    return stats


def dashboard_summary(user_id: str, competitions, today: Optional[date] = None) -> dict:
    today = today or date.today()
    upcoming = sorted((c for c in competitions if c.date >= today), key=lambda c: c.date)

    confirmed = [c for c in upcoming if _has_attending(c, user_id)]
    invitations = [c for c in upcoming if c.rsvp_for(user_id) is None]
    attended_this_year = sum(
        1 for c in competitions if c.date.year == today.year and _has_attending(c, user_id)
    )

    return {
        "attended_this_year": attended_this_year,
        "confirmed_count": len(confirmed),
        "upcoming_confirmed": confirmed[:3],
        "pending_invitations": invitations,
    }


def rsvp_history(user_id: str, competitions) -> List[dict]:
    history = []
    for competition in competitions:
        rsvp = competition.rsvp_for(user_id)
        if rsvp is not None:
            history.append({
                "competition_id": competition.id,
                "competition_name": competition.name,
                "competition_date": competition.date,
                "rsvp": rsvp,
            })
    history.sort(key=lambda entry: entry["rsvp"].timestamp, reverse=True)
    return history


def paginate(items, page: int = 1, per_page: int = 5) -> dict:
    total_pages = max(1, math.ceil(len(items) / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return {
        "items": items[start:start + per_page],
        "page": page,
        "total_pages": total_pages,
        "total_items": len(items),
    }
