"""
Periodic ingestion of Nature Remo readings
"""
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
import logging
import asyncio

from remo_monitor.database import SessionLocal, get_engine, settings
from remo_monitor.errors import RemoMonitorError
from remo_monitor.providers.nature_remo_provider import get_nature_remo_provider
from remo_monitor.services.ingestion import ingest_latest

logger = logging.getLogger(__name__)
scheduler = BackgroundScheduler()

JOB_ID = "sensor_ingestion"

def ingest_sensor_data():
    """Fetch and store one reading per device; failures wait for the next tick"""
    db = None
    try:
        get_engine()
        db = SessionLocal()
        count = asyncio.run(ingest_latest(db, get_nature_remo_provider()))
        logger.info(f"Scheduled ingestion stored {count} reading(s)")
    except RemoMonitorError as e:
        logger.error(f"Scheduled ingestion failed: {e.message}")
    except Exception as e:
        logger.error(f"Unexpected error in scheduled ingestion: {str(e)}")
    finally:
        if db is not None:
            db.close()

def start_scheduler(interval_ms: int = None):
    """Start the ingestion scheduler; a tick is skipped while the previous one is still running"""
    interval_seconds = (interval_ms or settings.data_refresh_interval) / 1000
    if not scheduler.running:
        scheduler.add_job(
            ingest_sensor_data,
            IntervalTrigger(seconds=interval_seconds),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        scheduler.start()
        logger.info(f"Sensor ingestion scheduler started (interval: {interval_seconds:g} seconds)")

def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Sensor ingestion scheduler stopped")
