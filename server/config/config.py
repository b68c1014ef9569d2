import os

SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY")
SESSION_HTTPS_ONLY = os.getenv("SESSION_HTTPS_ONLY", "true").lower() in {"1", "true", "yes"}
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# memory | file | mongo
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")
STORAGE_PATH = os.getenv("STORAGE_PATH", "data")
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "swimref")

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"))

GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")

# 0 keeps every notification
NOTIFICATION_RETENTION_PER_USER = int(os.getenv("NOTIFICATION_RETENTION_PER_USER", "0"))
