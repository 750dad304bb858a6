from sqlalchemy import create_engine, DateTime
from sqlalchemy.engine import make_url
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from sqlalchemy.types import TypeDecorator
from pydantic_settings import BaseSettings
from datetime import datetime, timezone
import os
import threading
from dotenv import load_dotenv

from remo_monitor.errors import ConfigError

load_dotenv()

class Settings(BaseSettings):
    nature_remo_access_token: str = os.getenv("NATURE_REMO_ACCESS_TOKEN", "")
    nature_remo_api_endpoint: str = os.getenv("NATURE_REMO_API_ENDPOINT", "https://api.nature.global/1")
    nature_remo_timeout: float = float(os.getenv("NATURE_REMO_TIMEOUT", "30"))

    database_url: str = os.getenv("DATABASE_URL", "")
    database_access_key: str = os.getenv("DATABASE_ACCESS_KEY", "")

    # milliseconds, same unit the dashboard frontend uses
    data_refresh_interval: int = int(os.getenv("DATA_REFRESH_INTERVAL", "300000"))
    auto_ingest: bool = os.getenv("AUTO_INGEST", "false").lower() == "true"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

settings = Settings()

Base = declarative_base()
SessionLocal = sessionmaker(autocommit=False, autoflush=False)

_engine = None
_engine_lock = threading.Lock()

def get_utc_datetime() -> datetime:
    return datetime.now(timezone.utc)

class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetime, also on backends that store naive values (SQLite)"""
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

def build_database_url(url: str, access_key: str = ""):
    if not url:
        raise ConfigError("Database connection is not configured. Please set DATABASE_URL in your environment variables.")
    parsed = make_url(url)
    if access_key:
        parsed = parsed.set(password=access_key)
    return parsed

def get_engine():
    """Create the engine on first use so an unconfigured store fails per request"""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                url = build_database_url(settings.database_url, settings.database_access_key)
                engine = create_engine(
                    url,
                    connect_args={"check_same_thread": False} if url.get_backend_name() == "sqlite" else {}
                )
                SessionLocal.configure(bind=engine)
                _engine = engine
    return _engine

def get_db():
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
