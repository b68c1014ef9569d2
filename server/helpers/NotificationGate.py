from models.models import Notification, NotificationPreferences

CHANNELS = ("toast", "email")


def should_alert(preferences: NotificationPreferences, notification: Notification, channel: str = "toast") -> bool:
    """Decide whether a stored notification is surfaced on a channel for its recipient"""
    if channel not in CHANNELS:
        raise ValueError(f"Unknown notification channel '{channel}'")
    if notification.category is None:
        return True
    return getattr(preferences.for_category(notification.category), channel)


def pending_alerts(preferences: NotificationPreferences, notifications, channel: str = "toast"):
    return [n for n in notifications if not n.is_read and should_alert(preferences, n, channel)]
