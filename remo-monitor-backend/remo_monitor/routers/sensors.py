# remo_monitor/routers/sensors.py
from typing import Optional, List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from remo_monitor.database import get_db
from remo_monitor.providers.nature_remo_provider import NatureRemoProvider, get_nature_remo_provider
from remo_monitor.schemas.nature_remo import DeviceSummary
from remo_monitor.schemas.sensor_data import SensorDataResponse, SaveSensorDataResponse
from remo_monitor.services.ingestion import ingest_latest
from remo_monitor.services.sensor_query import query_sensor_data, summarize_devices, DEFAULT_HOURS, DEFAULT_LIMIT

router = APIRouter(prefix="/api", tags=["sensors"])

# ---------- Storico letture, dalla più recente ----------
@router.get("/get-sensor-data", response_model=List[SensorDataResponse])
def get_sensor_data(
    device_id: Optional[str] = None,
    limit: int = Query(DEFAULT_LIMIT, gt=0),
    hours: int = Query(DEFAULT_HOURS, gt=0),
    db: Session = Depends(get_db),
):
    return query_sensor_data(db, device_id=device_id, hours=hours, limit=limit)

# ---------- Ingest: legge Nature Remo e salva una riga per device ----------
@router.post("/save-sensor-data", response_model=SaveSensorDataResponse)
async def save_sensor_data(
    db: Session = Depends(get_db),
    provider: NatureRemoProvider = Depends(get_nature_remo_provider),
):
    count = await ingest_latest(db, provider)
    return {"success": True, "message": f"Successfully saved data for {count} device(s)"}

# ---------- Valori correnti per device, dallo storico ----------
@router.get("/sensor-summary", response_model=List[DeviceSummary])
def sensor_summary(
    limit: int = Query(DEFAULT_LIMIT, gt=0),
    hours: int = Query(DEFAULT_HOURS, gt=0),
    db: Session = Depends(get_db),
):
    rows = query_sensor_data(db, hours=hours, limit=limit)
    return summarize_devices(rows)
