from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager

from config.config import SESSION_SECRET_KEY, SESSION_HTTPS_ONLY, FRONTEND_URL, STORAGE_BACKEND, NOTIFICATION_RETENTION_PER_USER
from database.DB import build_storage
from database.RosterStore import RosterStore
from routes import AuthRouter, CompetitionRouter, UserRouter, NotificationRouter, CommitteeRouter, BriefingRouter

''' The SwimRef backend API Endpoints setup '''

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: load the roster from storage
    storage = build_storage()
    app.state.store = RosterStore(storage, retention_per_user=NOTIFICATION_RETENTION_PER_USER)
    print(f"Roster store loaded from '{STORAGE_BACKEND}' storage "
          f"({len(app.state.store.users)} users, {len(app.state.store.competitions)} competitions)")

    yield

    print("Application shutting down")

app = FastAPI(title="SwimRef API", lifespan=lifespan)

allowed_origins = [FRONTEND_URL]
if FRONTEND_URL != "http://localhost:5173":
    allowed_origins.append("http://localhost:5173")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
    max_age=3600,
)

if not SESSION_SECRET_KEY:
    raise ValueError("SESSION_SECRET_KEY environment variable not set!")

app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET_KEY,
    session_cookie="session",
    max_age=3600,
    same_site="none" if SESSION_HTTPS_ONLY else "lax",
    https_only=SESSION_HTTPS_ONLY
)

# Include routers
app.include_router(AuthRouter.router, prefix="/api", tags=["Authentication"])
app.include_router(CompetitionRouter.router, prefix="/api/competitions", tags=["Competitions"])
app.include_router(UserRouter.router, prefix="/api/users", tags=["Users"])
app.include_router(NotificationRouter.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(CommitteeRouter.router, prefix="/api/committee", tags=["Committee"])
app.include_router(BriefingRouter.router, prefix="/api", tags=["Briefing"])
