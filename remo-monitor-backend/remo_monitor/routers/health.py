from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import logging

from remo_monitor.database import get_engine, settings
from remo_monitor.errors import ConfigError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

@router.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "remo-monitor-api"}

@router.get("/api/health")
def api_health_check():
    """API health check with store and credential status"""
    database = "ok"
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except ConfigError:
        database = "not_configured"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {str(e)}")
        database = "unavailable"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "nature_remo_token_configured": bool(settings.nature_remo_access_token),
    }
