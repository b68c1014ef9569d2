from .BriefingGenerator import build_briefing_prompt, generate_briefing
from .CalendarLink import google_calendar_url
from .DocumentContent import encode_data_url, decode_data_url, read_upload, format_bytes
from .NotificationGate import should_alert, pending_alerts
from .Statistics import competition_seasons, referee_attendance, dashboard_summary, rsvp_history, paginate

__all__ = [
    'build_briefing_prompt',
    'generate_briefing',
    'google_calendar_url',
    'encode_data_url',
    'decode_data_url',
    'read_upload',
    'format_bytes',
    'should_alert',
    'pending_alerts',
    'competition_seasons',
    'referee_attendance',
    'dashboard_summary',
    'rsvp_history',
    'paginate'
]
