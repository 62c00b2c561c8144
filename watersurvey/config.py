import os
from dotenv import load_dotenv
load_dotenv()


def _database_uri():
    uri = os.getenv("DATABASE_URL")
    if uri:
        # SQLAlchemy 1.4+ rejects the legacy scheme
        if uri.startswith("postgres://"):
            uri = uri.replace("postgres://", "postgresql://", 1)
        return uri
    # serverless hosts only allow writes under /tmp
    if os.getenv("VERCEL"):
        return "sqlite:////tmp/survey.db"
    return "sqlite:///survey.db"


def _optional_float(name):
    v = os.getenv(name)
    if not v:
        return None
    return float(v)


class Settings:
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key")
    APP_ENV = os.getenv("APP_ENV", os.getenv("FLASK_ENV", "development"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 16 * 1024 * 1024))

    # Spreadsheet mirror (Apps Script web app)
    MIRROR_URL = os.getenv("GOOGLE_SHEET_WEBAPP_URL", "")
    MIRROR_TIMEOUT = _optional_float("MIRROR_TIMEOUT")


class TestingSettings(Settings):
    TESTING = True
    APP_ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    MIRROR_URL = ""
    MIRROR_TIMEOUT = None
