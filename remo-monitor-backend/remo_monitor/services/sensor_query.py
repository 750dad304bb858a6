"""
Read side of the sensor_data table
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, List, Optional
from datetime import datetime, timedelta
import logging

from remo_monitor.database import get_utc_datetime
from remo_monitor.errors import StoreError, describe_store_error
from remo_monitor.models.sensor_data import SensorData
from remo_monitor.schemas.nature_remo import METRIC_CODES, DeviceSummary, SensorEvent

logger = logging.getLogger(__name__)

DEFAULT_HOURS = 24
DEFAULT_LIMIT = 100

def query_sensor_data(
    db: Session,
    device_id: Optional[str] = None,
    hours: int = DEFAULT_HOURS,
    limit: int = DEFAULT_LIMIT,
    now: Optional[datetime] = None,
) -> List[SensorData]:
    """Most recent rows inside the trailing window, newest first"""
    if hours <= 0:
        raise ValueError("hours must be positive")
    if limit <= 0:
        raise ValueError("limit must be positive")

    since = (now or get_utc_datetime()) - timedelta(hours=hours)

    query = db.query(SensorData).filter(SensorData.created_at >= since)
    if device_id:
        query = query.filter(SensorData.device_id == device_id)

    try:
        return (
            query
            .order_by(SensorData.created_at.desc(), SensorData.id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Error querying sensor data: {str(e)}")
        raise StoreError(f"Failed to fetch data from the database: {describe_store_error(e)}") from e

def summarize_devices(rows: List[SensorData]) -> List[DeviceSummary]:
    """Group rows by device and take current values from each device's freshest row"""
    grouped: Dict[str, List[SensorData]] = {}
    for row in rows:
        grouped.setdefault(row.device_id, []).append(row)

    summaries = []
    for device_id, device_rows in grouped.items():
        latest = max(device_rows, key=lambda r: (r.created_at, r.id or 0))
        events = {}
        for code, column in METRIC_CODES.items():
            value = getattr(latest, column)
            if value is not None:
                events[code] = SensorEvent(val=value, created_at=latest.created_at)
        summaries.append(DeviceSummary(
            id=device_id,
            name=latest.device_name,
            newest_events=events,
            reading_count=len(device_rows),
        ))
    return summaries
