"""
Database initialization script
Creates the sensor_data table
"""
import logging

from remo_monitor.database import get_engine
from remo_monitor.models import Base

logger = logging.getLogger(__name__)

def init_database():
    """Create tables that do not exist yet; existing rows are left untouched"""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized ({engine.url.render_as_string(hide_password=True)})")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
