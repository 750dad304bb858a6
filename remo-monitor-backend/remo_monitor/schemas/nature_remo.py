from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List, Dict, Any

METRIC_CODES = {
    "te": "temperature",
    "hu": "humidity",
    "il": "illuminance",
    "mo": "movement",
}

class SensorEvent(BaseModel):
    val: float
    created_at: datetime  # observation time reported by upstream

class NewestEvents(BaseModel):
    te: Optional[SensorEvent] = None  # temperature
    hu: Optional[SensorEvent] = None  # humidity
    il: Optional[SensorEvent] = None  # illuminance
    mo: Optional[SensorEvent] = None  # movement

    class Config:
        extra = "allow"

    def value_of(self, code: str) -> Optional[float]:
        event = getattr(self, code)
        return event.val if event else None

class DeviceSnapshot(BaseModel):
    id: str
    name: str
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    firmware_version: Optional[str] = None
    newest_events: NewestEvents = NewestEvents()

    class Config:
        extra = "allow"

class DeviceInfo(BaseModel):
    """Device metadata returned by /api/devices"""
    id: str
    name: str
    serial_number: Optional[str] = None
    mac_address: Optional[str] = None
    firmware_version: Optional[str] = None
    newest_events: Dict[str, Any] = {}

    @classmethod
    def from_snapshot(cls, device: DeviceSnapshot) -> "DeviceInfo":
        return cls(
            id=device.id,
            name=device.name,
            serial_number=device.serial_number,
            mac_address=device.mac_address,
            firmware_version=device.firmware_version,
            newest_events=device.newest_events.model_dump(mode="json", exclude_none=True),
        )

class DeviceSummary(BaseModel):
    """Current values of a device, derived from its freshest stored row"""
    id: str
    name: str
    newest_events: Dict[str, SensorEvent] = {}
    reading_count: int = 0
