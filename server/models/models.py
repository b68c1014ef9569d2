from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import date, datetime
from enum import Enum


class UserRole(str, Enum):
    ADMINISTRATOR = "Administrator"
    REFEREE = "Referee"


class UserStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"


class RSVPStatus(str, Enum):
    ATTENDING = "Attending"
    NOT_ATTENDING = "Not Attending"
    PENDING = "Pending"


class NotificationCategory(str, Enum):
    NEW_COMPETITION = "newCompetition"
    RSVP_CHANGE = "rsvpChange"
    PAYMENT_UPDATE = "paymentUpdate"


class NotificationSeverity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"


class CompetitionLevel(str, Enum):
    CLUB = "Club"
    REGIONAL = "Regional"
    NATIONAL = "National"
    INTERNATIONAL = "International"


class PoolType(str, Enum):
    SHORT_COURSE = "25m"
    LONG_COURSE = "50m"


class ChannelPreference(BaseModel):
    toast: bool = True
    email: bool = False


class NotificationPreferences(BaseModel):
    new_competitions: ChannelPreference = Field(default_factory=lambda: ChannelPreference(toast=True, email=False))
    rsvp_changes: ChannelPreference = Field(default_factory=lambda: ChannelPreference(toast=True, email=True))
    payment_updates: ChannelPreference = Field(default_factory=lambda: ChannelPreference(toast=True, email=True))

    def for_category(self, category: NotificationCategory) -> ChannelPreference:
        if category == NotificationCategory.NEW_COMPETITION:
            return self.new_competitions
        if category == NotificationCategory.RSVP_CHANGE:
            return self.rsvp_changes
        return self.payment_updates


class User(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole = UserRole.REFEREE
    status: UserStatus = UserStatus.PENDING
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)
    profile_picture_url: Optional[str] = None


class RSVP(BaseModel):
    """One official's answer for a competition.

    ``user_name`` and ``user_role`` are copied from the user when the answer is
    given and are not refreshed afterwards, so the roster shows who answered as
    they were at that moment.
    """
    id: str
    user_id: str
    user_name: str
    user_role: UserRole
    status: RSVPStatus
    comment: str = ""
    timestamp: datetime


class PaymentLog(BaseModel):
    id: str
    user_name: str
    status: bool
    timestamp: datetime


class CompetitionDocument(BaseModel):
    id: str
    name: str
    type: str
    size: int
    url: str
    timestamp: datetime


class Competition(BaseModel):
    id: str
    name: str
    date: date
    location: str
    pool_type: PoolType = PoolType.SHORT_COURSE
    description: str = ""
    level: CompetitionLevel = CompetitionLevel.REGIONAL
    is_paid: bool = False
    payment_history: List[PaymentLog] = Field(default_factory=list)
    rsvps: List[RSVP] = Field(default_factory=list)
    documents: List[CompetitionDocument] = Field(default_factory=list)
    cra_responsible: str = ""

    def rsvp_for(self, user_id: str) -> Optional[RSVP]:
        for rsvp in self.rsvps:
            if rsvp.user_id == user_id:
                return rsvp
        return None

    def attending_user_ids(self) -> List[str]:
        return [r.user_id for r in self.rsvps if r.status == RSVPStatus.ATTENDING]


class CompetitionInput(BaseModel):
    """Fields an administrator may set when creating or editing a competition.

    ``is_paid`` left as ``None`` keeps the stored flag on edits and means
    unpaid on creation.
    """
    id: Optional[str] = None
    name: str
    date: date
    location: str
    pool_type: PoolType = PoolType.SHORT_COURSE
    description: str = ""
    level: CompetitionLevel = CompetitionLevel.REGIONAL
    is_paid: Optional[bool] = None
    cra_responsible: str = ""


class Notification(BaseModel):
    id: str
    recipient_id: str
    title: str
    message: str
    type: NotificationSeverity = NotificationSeverity.INFO
    category: Optional[NotificationCategory] = None
    timestamp: datetime
    is_read: bool = False
    link_to: Optional[str] = None


class CommitteeMember(BaseModel):
    id: str
    name: str
    role: str
    email: str
    phone: str = ""
    photo_url: Optional[str] = None


class CommitteeConfig(BaseModel):
    technical_email: str
    administrative_email: str


class Committee(BaseModel):
    members: List[CommitteeMember] = Field(default_factory=list)
    config: CommitteeConfig
