from remo_monitor.database import Base
from .sensor_data import SensorData

__all__ = [
    "Base",
    "SensorData"
]
