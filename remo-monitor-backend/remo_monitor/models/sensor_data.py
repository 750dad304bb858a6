from sqlalchemy import Column, Integer, String, Float
from remo_monitor.database import Base, UTCDateTime

class SensorData(Base):
    __tablename__ = "sensor_data"

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String, nullable=False, index=True)  # Nature Remo device id
    device_name = Column(String, nullable=False)  # name at ingestion time, may change upstream
    temperature = Column(Float, nullable=True)  # te
    humidity = Column(Float, nullable=True)  # hu
    illuminance = Column(Float, nullable=True)  # il
    movement = Column(Float, nullable=True)  # mo
    created_at = Column(UTCDateTime, nullable=False, index=True)  # ingestion time
