from .nature_remo import SensorEvent, NewestEvents, DeviceSnapshot, DeviceInfo, DeviceSummary
from .sensor_data import SensorDataResponse, SaveSensorDataResponse, ErrorResponse

__all__ = [
    "SensorEvent",
    "NewestEvents",
    "DeviceSnapshot",
    "DeviceInfo",
    "DeviceSummary",
    "SensorDataResponse",
    "SaveSensorDataResponse",
    "ErrorResponse"
]
