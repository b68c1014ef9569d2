"""
Tests for calendar links, document content references,
the notification preference gate and attendance statistics
"""
from datetime import date, datetime, timezone

import pytest

from database.exceptions import InvalidInput
from helpers.CalendarLink import google_calendar_url
from helpers.DocumentContent import encode_data_url, decode_data_url, format_bytes
from helpers.NotificationGate import should_alert, pending_alerts
from helpers.Statistics import competition_seasons, referee_attendance, dashboard_summary, rsvp_history, paginate
from models.models import (
    Competition, RSVP, RSVPStatus, User, UserRole, UserStatus, Notification, NotificationCategory,
    NotificationPreferences, ChannelPreference
)


def _competition(competition_id, day, rsvps=()):
    return Competition(
        id=competition_id,
        name=f"Meet {competition_id}",
        date=day,
        location="Jamor",
        rsvps=list(rsvps),
    )


def _rsvp(user_id, status, when=None):
    return RSVP(
        id=f"r-{user_id}-{status.value}",
        user_id=user_id,
        user_name=user_id,
        user_role=UserRole.REFEREE,
        status=status,
        timestamp=when or datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def _user(user_id, role=UserRole.REFEREE):
    return User(id=user_id, name=user_id.upper(), email=f"{user_id}@swimref.pt", role=role, status=UserStatus.APPROVED)


def _notification(category, is_read=False):
    return Notification(
        id="n1",
        recipient_id="u2",
        title="t",
        message="m",
        category=category,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        is_read=is_read,
    )


def test_google_calendar_url():
    """Test the all-day calendar link and its escaping"""
    competition = Competition(
        id="c1",
        name="Campeonato de Inverno & Juvenis",
        date=date(2024, 12, 31),
        location="Jamor, Oeiras",
        description="Briefing (08h30)",
    )
    url = google_calendar_url(competition)

    assert url.startswith("https://www.google.com/calendar/render?action=TEMPLATE&text=")
    assert "text=Campeonato%20de%20Inverno%20%26%20Juvenis" in url
    assert "dates=20241231/20250101" in url
    assert "details=Briefing%20(08h30)%0A%0ALocation%3A%20Jamor%2C%20Oeiras" in url
    assert url.endswith("&location=Jamor%2C%20Oeiras")


def test_data_url_round_trip_and_errors():
    url = encode_data_url("application/pdf", b"%PDF-1.4")
    assert url.startswith("data:application/pdf;base64,")
    assert decode_data_url(url) == ("application/pdf", b"%PDF-1.4")

    with pytest.raises(InvalidInput):
        decode_data_url("https://example.com/file.pdf")
    with pytest.raises(InvalidInput):
        decode_data_url("data:text/plain;base64,@@@")


def test_format_bytes():
    assert format_bytes(0) == "0 Bytes"
    assert format_bytes(512) == "512 Bytes"
    assert format_bytes(1024) == "1 KB"
    assert format_bytes(1536) == "1.5 KB"
    assert format_bytes(1024 ** 2) == "1 MB"
    assert format_bytes(1234567) == "1.18 MB"


def test_gate_uses_category_and_channel():
    """Preferences decide per category and channel; uncategorised always alerts"""
    prefs = NotificationPreferences()
    assert should_alert(prefs, _notification(NotificationCategory.NEW_COMPETITION), "toast")
    assert not should_alert(prefs, _notification(NotificationCategory.NEW_COMPETITION), "email")

    prefs.payment_updates = ChannelPreference(toast=False, email=True)
    assert not should_alert(prefs, _notification(NotificationCategory.PAYMENT_UPDATE), "toast")
    assert should_alert(prefs, _notification(NotificationCategory.PAYMENT_UPDATE), "email")
    assert should_alert(prefs, _notification(None), "toast")

    with pytest.raises(ValueError):
        should_alert(prefs, _notification(None), "sms")


def test_pending_alerts_skips_read():
    prefs = NotificationPreferences()
    unread = _notification(NotificationCategory.RSVP_CHANGE)
    read = _notification(NotificationCategory.RSVP_CHANGE, is_read=True)
    assert pending_alerts(prefs, [unread, read]) == [unread]


def test_referee_attendance_by_season():
    """Attendance percentages are per referee per season, rounded half up"""
    competitions = [
        _competition("a", date(2024, 3, 1), [_rsvp("r1", RSVPStatus.ATTENDING)]),
        _competition("b", date(2024, 6, 1), [_rsvp("r1", RSVPStatus.NOT_ATTENDING)]),
        _competition("c", date(2025, 1, 1), [_rsvp("r2", RSVPStatus.ATTENDING)]),
    ]
    users = [_user("admin", UserRole.ADMINISTRATOR), _user("r1"), _user("r2")]

    stats = referee_attendance(competitions, users)
    assert [s["referee_id"] for s in stats] == ["r1", "r2"]
    r1 = {s["season"]: s for s in stats[0]["seasonal_stats"]}
    assert r1[2024] == {"season": 2024, "attended": 1, "total": 2, "percentage": 50}
    assert r1[2025]["percentage"] == 0
    assert [s["season"] for s in stats[1]["seasonal_stats"]] == [2025, 2024]

    only_2025 = referee_attendance(competitions, users, season=2025)
    assert only_2025[1]["seasonal_stats"] == [{"season": 2025, "attended": 1, "total": 1, "percentage": 100}]
    assert referee_attendance(competitions, users, season=1990) == []


def test_percentage_rounds_half_up():
    competitions = [_competition(str(i), date(2024, 1, i + 1)) for i in range(8)]
    competitions[0].rsvps.append(_rsvp("r1", RSVPStatus.ATTENDING))
    stats = referee_attendance(competitions, [_user("r1")])
    assert stats[0]["seasonal_stats"][0]["percentage"] == 13


def test_dashboard_summary():
    today = date(2024, 6, 1)
    competitions = [
        _competition("past", date(2024, 2, 1), [_rsvp("u2", RSVPStatus.ATTENDING)]),
        _competition("later", date(2024, 9, 1), [_rsvp("u2", RSVPStatus.ATTENDING)]),
        _competition("soon", date(2024, 7, 1), [_rsvp("u2", RSVPStatus.ATTENDING)]),
        _competition("open", date(2024, 8, 1)),
        _competition("declined", date(2024, 8, 2), [_rsvp("u2", RSVPStatus.NOT_ATTENDING)]),
    ]
    summary = dashboard_summary("u2", competitions, today)

    assert summary["attended_this_year"] == 3
    assert [c.id for c in summary["upcoming_confirmed"]] == ["soon", "later"]
    assert [c.id for c in summary["pending_invitations"]] == ["open"]


def test_rsvp_history_newest_first():
    competitions = [
        _competition("a", date(2024, 3, 1), [_rsvp("u2", RSVPStatus.ATTENDING, datetime(2024, 1, 1, tzinfo=timezone.utc))]),
        _competition("b", date(2024, 4, 1), [_rsvp("u2", RSVPStatus.PENDING, datetime(2024, 2, 1, tzinfo=timezone.utc))]),
        _competition("c", date(2024, 5, 1)),
    ]
    history = rsvp_history("u2", competitions)
    assert [h["competition_id"] for h in history] == ["b", "a"]


def test_paginate():
    result = paginate(list(range(12)), page=3, per_page=5)
    assert result == {"items": [10, 11], "page": 3, "total_pages": 3, "total_items": 12}
    assert paginate([], page=4)["page"] == 1


def test_competition_seasons():
    competitions = [_competition("a", date(2023, 1, 1)), _competition("b", date(2025, 1, 1)),
                    _competition("c", date(2023, 5, 1))]
    assert competition_seasons(competitions) == [2025, 2023]
