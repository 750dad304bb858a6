from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class SensorDataResponse(BaseModel):
    id: int
    device_id: str
    device_name: str
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    illuminance: Optional[float] = None
    movement: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True

class SaveSensorDataResponse(BaseModel):
    success: bool
    message: str

class ErrorResponse(BaseModel):
    message: str
