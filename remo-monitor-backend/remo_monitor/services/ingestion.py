"""
Ingestion of Nature Remo device snapshots into the sensor_data table
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import datetime
import logging
from fastapi.concurrency import run_in_threadpool

from remo_monitor.database import get_utc_datetime
from remo_monitor.errors import NoDevicesError, StoreError, describe_store_error
from remo_monitor.models.sensor_data import SensorData
from remo_monitor.providers.nature_remo_provider import NatureRemoProvider
from remo_monitor.schemas.nature_remo import DeviceSnapshot

logger = logging.getLogger(__name__)

def build_sensor_rows(devices: List[DeviceSnapshot], ingested_at: datetime) -> List[SensorData]:
    """Flatten snapshots into rows that all share one ingestion timestamp"""
    return [
        SensorData(
            device_id=device.id,
            device_name=device.name,
            temperature=device.newest_events.value_of("te"),
            humidity=device.newest_events.value_of("hu"),
            illuminance=device.newest_events.value_of("il"),
            movement=device.newest_events.value_of("mo"),
            created_at=ingested_at,
        )
        for device in devices
    ]

def save_devices(db: Session, devices: List[DeviceSnapshot], now: Optional[datetime] = None) -> int:
    """Insert one row per device in a single batch and return the row count"""
    if not devices:
        raise ValueError("save_devices requires at least one device")

    rows = build_sensor_rows(devices, now or get_utc_datetime())
    try:
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving sensor data for {len(rows)} device(s): {str(e)}")
        raise StoreError(f"Failed to save data to the database: {describe_store_error(e)}") from e

    return len(rows)

async def ingest_latest(db: Session, provider: NatureRemoProvider) -> int:
    """Fetch the current device list from Nature Remo and store one reading per device"""
    devices = await provider.get_devices()
    if not devices:
        raise NoDevicesError("No devices found")

    # commit off the event loop
    count = await run_in_threadpool(save_devices, db, devices)
    logger.info(f"Saved sensor data for {count} device(s)")
    return count
