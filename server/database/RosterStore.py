import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from pydantic import TypeAdapter, ValidationError

from models.models import (
    User, UserRole, UserStatus, NotificationPreferences, Competition, CompetitionInput, RSVP, RSVPStatus,
    PaymentLog, CompetitionDocument, Notification, NotificationCategory, NotificationSeverity,
    Committee, CommitteeMember, CommitteeConfig
)
from database.exceptions import NotFound, DuplicateEmail, AccountPending, LastAdministrator, InvalidInput
from database.seed import seed_users, seed_competitions, seed_notifications, seed_committee

USERS_KEY = "swimref-users-list"
COMPETITIONS_KEY = "swimref-competitions-list"
NOTIFICATIONS_KEY = "swimref-notifications"
COMMITTEE_KEY = "swimref-committee"

PROFILE_FIELDS = ("name", "email", "profile_picture_url")

_users_adapter = TypeAdapter(List[User])
_competitions_adapter = TypeAdapter(List[Competition])
_notifications_adapter = TypeAdapter(List[Notification])


def _now():
    return datetime.now(timezone.utc)


def _new_id():
    return str(uuid.uuid4())


class RosterStore:
    """
    Owns users, competitions (with their RSVPs, payment history and documents),
    notifications and the committee roster.

    Every mutation is applied in memory and the touched collections are written
    back to ``storage`` before the method returns.
    """

    def __init__(self, storage, retention_per_user: int = 0):
        self.storage = storage
        self.retention_per_user = retention_per_user
        self.users: List[User] = self._load(USERS_KEY, _users_adapter.validate_json, seed_users)
        self.competitions: List[Competition] = self._load(
            COMPETITIONS_KEY, _competitions_adapter.validate_json, seed_competitions
        )
        self.notifications: List[Notification] = self._load(
            NOTIFICATIONS_KEY, _notifications_adapter.validate_json, seed_notifications
        )
        self.committee: Committee = self._load(COMMITTEE_KEY, Committee.model_validate_json, seed_committee)
        self._save_all()

    # ----------------------- persistence -----------------------

    def _load(self, key, parse, seed):
        try:
            blob = self.storage.load(key)
        except UnicodeDecodeError as e:
            print(f"Snapshot under '{key}' is not valid UTF-8 ({e.reason}), using seed data")
            return seed()
        if blob is None:
            print(f"No snapshot stored under '{key}', using seed data")
            return seed()
        try:
            return parse(blob)
        except ValidationError as e:
            print(f"Snapshot under '{key}' is unreadable ({e.error_count()} errors), using seed data")
            return seed()

    def _save_users(self):
        self.storage.save(USERS_KEY, _users_adapter.dump_json(self.users).decode("utf-8"))

    def _save_competitions(self):
        self.storage.save(COMPETITIONS_KEY, _competitions_adapter.dump_json(self.competitions).decode("utf-8"))

    def _save_notifications(self):
        self.storage.save(NOTIFICATIONS_KEY, _notifications_adapter.dump_json(self.notifications).decode("utf-8"))

    def _save_committee(self):
        self.storage.save(COMMITTEE_KEY, self.committee.model_dump_json())

    def _save_all(self):
        self._save_users()
        self._save_competitions()
        self._save_notifications()
        self._save_committee()

    # ----------------------- lookups -----------------------

    def find_user_by_email(self, email: str) -> Optional[User]:
        wanted = email.strip().lower()
        for user in self.users:
            if user.email.strip().lower() == wanted:
                return user
        return None

    def get_user(self, user_id: str) -> User:
        for user in self.users:
            if user.id == user_id:
                return user
        raise NotFound("User", user_id)

    def get_competition(self, competition_id: str) -> Competition:
        competition = self._find_competition(competition_id)
        if competition is None:
            raise NotFound("Competition", competition_id)
        return competition

    def _find_competition(self, competition_id) -> Optional[Competition]:
        for competition in self.competitions:
            if competition.id == competition_id:
                return competition
        return None

    def get_document(self, competition_id: str, document_id: str) -> CompetitionDocument:
        competition = self.get_competition(competition_id)
        for document in competition.documents:
            if document.id == document_id:
                return document
        raise NotFound("Document", document_id)

    def list_competitions(self, search: Optional[str] = None, season: Optional[int] = None) -> List[Competition]:
        result = self.competitions
        if search:
            needle = search.lower()
            result = [c for c in result if needle in c.name.lower()]
        if season is not None:
            result = [c for c in result if c.date.year == season]
        return list(result)

    def notifications_for(self, user_id: str) -> List[Notification]:
        return [n for n in self.notifications if n.recipient_id == user_id]

    def _ensure_email_free(self, email: str, owner_id: Optional[str] = None):
        existing = self.find_user_by_email(email)
        if existing and existing.id != owner_id:
            raise DuplicateEmail(email)

    # ----------------------- users -----------------------

    def authenticate(self, email: str) -> User:
        user = self.find_user_by_email(email)
        if user is None:
            raise NotFound("User", email)
        if user.status == UserStatus.PENDING:
            raise AccountPending(user.email)
        return user

    def register_user(self, name: str, email: str) -> User:
        """Self-registration: always a pending referee until an administrator approves it."""
        name = name.strip()
        email = email.strip()
        if not name or not email:
            raise InvalidInput("Name and email are required")
        self._ensure_email_free(email)

        user = User(
            id=_new_id(),
            name=name,
            email=email,
            role=UserRole.REFEREE,
            status=UserStatus.PENDING,
            preferences=NotificationPreferences(),
        )
        self.users.append(user)
        self._save_users()
        return user

    def login_with_provider(self, email: str, name: str, picture_url: Optional[str] = None) -> Tuple[str, User]:
        """
        Sign-in through an external identity provider.
        Returns ``approved``, ``pending_existing`` or ``pending_new`` with the user record.
        """
        user = self.find_user_by_email(email)
        if user is not None:
            if user.status == UserStatus.APPROVED:
                return "approved", user
            return "pending_existing", user

        user = User(
            id=_new_id(),
            name=name or email.split("@")[0],
            email=email.strip(),
            role=UserRole.REFEREE,
            status=UserStatus.PENDING,
            preferences=NotificationPreferences(),
            profile_picture_url=picture_url,
        )
        self.users.append(user)
        self._save_users()
        return "pending_new", user

    def approve_user(self, user_id: str) -> User:
        user = self.get_user(user_id)
        user.status = UserStatus.APPROVED
        self._save_users()
        self.notify(
            user.id,
            "Account approved",
            "Your account has been approved. You can now sign in and answer competition invitations.",
            NotificationSeverity.SUCCESS,
        )
        return user

    def update_user(self, user_id: str, name: Optional[str] = None, email: Optional[str] = None) -> User:
        user = self.get_user(user_id)
        if email is not None:
            self._ensure_email_free(email, owner_id=user.id)
            user.email = email.strip()
        if name is not None:
            user.name = name.strip()
        self._save_users()
        return user

    def change_role(self, user_id: str, role: UserRole) -> User:
        user = self.get_user(user_id)
        if user.role == UserRole.ADMINISTRATOR and role != UserRole.ADMINISTRATOR:
            admins = [u for u in self.users if u.role == UserRole.ADMINISTRATOR]
            if len(admins) <= 1:
                raise LastAdministrator()
        user.role = role
        self._save_users()
        return user

    def delete_user(self, user_id: str) -> None:
        remaining = [u for u in self.users if u.id != user_id]
        if len(remaining) == len(self.users):
            return
        self.users = remaining

        touched = False
        for competition in self.competitions:
            kept = [r for r in competition.rsvps if r.user_id != user_id]
            if len(kept) != len(competition.rsvps):
                competition.rsvps = kept
                touched = True

        self._save_users()
        if touched:
            self._save_competitions()

    def update_preferences(self, user_id: str, preferences: NotificationPreferences) -> User:
        user = self.get_user(user_id)
        user.preferences = preferences
        self._save_users()
        return user

    def update_profile(self, user_id: str, patch: dict) -> User:
        user = self.get_user(user_id)
        unknown = set(patch) - set(PROFILE_FIELDS)
        if unknown:
            raise InvalidInput(f"Cannot update profile fields: {', '.join(sorted(unknown))}")

        patch = dict(patch)
        for field in ("name", "email"):
            if patch.get(field) is not None:
                patch[field] = patch[field].strip()
                if not patch[field]:
                    raise InvalidInput(f"Profile {field} cannot be empty")
        if patch.get("email") is not None:
            self._ensure_email_free(patch["email"], owner_id=user.id)

        for field, value in patch.items():
            if value is not None:
                setattr(user, field, value)
        self._save_users()
        return user

    # ----------------------- competitions -----------------------

    def save_competition(self, data: CompetitionInput, actor_name: Optional[str] = None) -> Competition:
        existing = self._find_competition(data.id) if data.id else None
        if existing is None:
            return self._create_competition(data)

        was_paid = existing.is_paid
        existing.name = data.name
        existing.date = data.date
        existing.location = data.location
        existing.pool_type = data.pool_type
        existing.description = data.description
        existing.level = data.level
        existing.cra_responsible = data.cra_responsible
        if data.is_paid is not None:
            existing.is_paid = data.is_paid

        if existing.is_paid != was_paid:
            self._record_payment(existing, actor_name or "System")
            self._notify_payment_change(existing)
            self._save_notifications()
        self._save_competitions()
        return existing

    def _create_competition(self, data: CompetitionInput) -> Competition:
        competition = Competition(
            id=data.id or _new_id(),
            name=data.name,
            date=data.date,
            location=data.location,
            pool_type=data.pool_type,
            description=data.description,
            level=data.level,
            is_paid=bool(data.is_paid),
            cra_responsible=data.cra_responsible,
        )
        self.competitions.insert(0, competition)

        for user in self.users:
            if user.role != UserRole.ADMINISTRATOR:
                self._push_notification(
                    user.id,
                    "New competition scheduled",
                    f'The competition "{competition.name}" has been added.',
                    NotificationSeverity.INFO,
                    NotificationCategory.NEW_COMPETITION,
                    competition.id,
                )
        self._save_competitions()
        self._save_notifications()
        return competition

    def delete_competition(self, competition_id: str) -> None:
        remaining = [c for c in self.competitions if c.id != competition_id]
        if len(remaining) == len(self.competitions):
            return
        self.competitions = remaining
        self._save_competitions()

    def toggle_payment(self, competition_id: str, acting_user_name: str) -> Competition:
        competition = self.get_competition(competition_id)
        competition.is_paid = not competition.is_paid
        self._record_payment(competition, acting_user_name)
        self._notify_payment_change(competition)
        self._save_competitions()
        self._save_notifications()
        return competition

    def _record_payment(self, competition: Competition, actor_name: str):
        competition.payment_history.append(
            PaymentLog(id=_new_id(), user_name=actor_name, status=competition.is_paid, timestamp=_now())
        )

    def _notify_payment_change(self, competition: Competition):
        attending = set(competition.attending_user_ids())
        state = "confirmed" if competition.is_paid else "marked as pending"
        severity = NotificationSeverity.SUCCESS if competition.is_paid else NotificationSeverity.WARNING
        for user in self.users:
            if user.id in attending:
                self._push_notification(
                    user.id,
                    "Payment update",
                    f'Payment for the competition "{competition.name}" has been {state}.',
                    severity,
                    NotificationCategory.PAYMENT_UPDATE,
                    competition.id,
                )

    # ----------------------- RSVPs -----------------------

    def submit_rsvp(self, user_id: str, competition_id: str, status: RSVPStatus, comment: str = "") -> RSVP:
        competition = self.get_competition(competition_id)
        user = self.get_user(user_id)

        rsvp = RSVP(
            id=_new_id(),
            user_id=user.id,
            user_name=user.name,
            user_role=user.role,
            status=status,
            comment=comment or "",
            timestamp=_now(),
        )
        competition.rsvps = [r for r in competition.rsvps if r.user_id != user.id] + [rsvp]

        self._push_notification(
            user.id,
            "Response recorded",
            f'Your status for "{competition.name}" is now: {status.value}.',
            NotificationSeverity.SUCCESS,
            NotificationCategory.RSVP_CHANGE,
            competition.id,
        )
        self._save_competitions()
        self._save_notifications()
        return rsvp

    # ----------------------- documents -----------------------

    def upload_document(self, competition_id: str, name: str, content_type: str, size: int,
                        content_ref: str) -> CompetitionDocument:
        competition = self.get_competition(competition_id)
        document = CompetitionDocument(
            id=_new_id(),
            name=name,
            type=content_type,
            size=size,
            url=content_ref,
            timestamp=_now(),
        )
        competition.documents.append(document)
        self._save_competitions()
        return document

    def delete_document(self, competition_id: str, document_id: str) -> None:
        competition = self._find_competition(competition_id)
        if competition is None:
            return
        kept = [d for d in competition.documents if d.id != document_id]
        if len(kept) == len(competition.documents):
            return
        competition.documents = kept
        self._save_competitions()

    # ----------------------- notifications -----------------------

    def _push_notification(self, recipient_id, title, message, severity, category=None, link_to=None) -> Notification:
        notification = Notification(
            id=_new_id(),
            recipient_id=recipient_id,
            title=title,
            message=message,
            type=severity,
            category=category,
            timestamp=_now(),
            is_read=False,
            link_to=link_to,
        )
        self.notifications.insert(0, notification)
        if self.retention_per_user > 0:
            self._prune(recipient_id)
        return notification

    def _prune(self, recipient_id: str):
        kept = []
        seen = 0
        for notification in self.notifications:
            if notification.recipient_id == recipient_id:
                seen += 1
                if seen > self.retention_per_user:
                    continue
            kept.append(notification)
        self.notifications = kept

    def notify(self, recipient_id: str, title: str, message: str,
               severity: NotificationSeverity = NotificationSeverity.INFO,
               category: Optional[NotificationCategory] = None,
               link_to: Optional[str] = None) -> Notification:
        """Always recorded; whether it pops up is decided later from the recipient's preferences."""
        notification = self._push_notification(recipient_id, title, message, severity, category, link_to)
        self._save_notifications()
        return notification

    def mark_read(self, notification_id: str) -> None:
        for notification in self.notifications:
            if notification.id == notification_id:
                if not notification.is_read:
                    notification.is_read = True
                    self._save_notifications()
                return
        raise NotFound("Notification", notification_id)

    def mark_all_read_for_user(self, user_id: str) -> None:
        changed = False
        for notification in self.notifications:
            if notification.recipient_id == user_id and not notification.is_read:
                notification.is_read = True
                changed = True
        if changed:
            self._save_notifications()

    # ----------------------- committee -----------------------

    def update_committee_member(self, member: CommitteeMember) -> CommitteeMember:
        for index, current in enumerate(self.committee.members):
            if current.id == member.id:
                self.committee.members[index] = member
                self._save_committee()
                return member
        raise NotFound("Committee member", member.id)

    def update_committee_config(self, config: CommitteeConfig) -> CommitteeConfig:
        self.committee.config = config
        self._save_committee()
        return config
