from datetime import date

from models.models import (
    User, UserRole, UserStatus, NotificationPreferences, Competition, CompetitionLevel, PoolType,
    Committee, CommitteeMember, CommitteeConfig
)


def seed_users():
    return [
        User(id="u1", name="Administrador Principal", email="admin@swimref.pt",
             role=UserRole.ADMINISTRATOR, status=UserStatus.APPROVED, preferences=NotificationPreferences()),
        User(id="u2", name="João Silva", email="ref@swimref.pt",
             role=UserRole.REFEREE, status=UserStatus.APPROVED, preferences=NotificationPreferences()),
    ]


def seed_competitions():
    return [
        Competition(
            id="c1",
            name="Campeonato Regional de Inverno 2024",
            date=date(2024, 12, 15),
            location="Complexo de Piscinas do Jamor",
            pool_type=PoolType.LONG_COURSE,
            description="Regional swimming championship for juniors and seniors. Mandatory briefing at 08:30.",
            level=CompetitionLevel.NATIONAL,
            is_paid=False,
            cra_responsible="Alexandre Alves",
        )
    ]


def seed_notifications():
    return []


def seed_committee():
    return Committee(
        members=[
            CommitteeMember(id="cra1", name="Alexandre Alves", role="President",
                            email="alexandre.alves@natacao.pt", phone="912 345 678"),
            CommitteeMember(id="cra2", name="Maria Leonor Ribeiro", role="Vice-President",
                            email="maria.ribeiro@natacao.pt", phone="934 567 890"),
            CommitteeMember(id="cra3", name="Vasco Lopes da Silva", role="Member",
                            email="vasco.silva@natacao.pt", phone="967 890 123"),
        ],
        config=CommitteeConfig(
            technical_email="ana@natacao.pt",
            administrative_email="conselho.arbitragem@natacao.pt",
        ),
    )
