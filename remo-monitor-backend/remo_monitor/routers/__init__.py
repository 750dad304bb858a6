from .devices import router as devices_router
from .sensors import router as sensors_router
from .health import router as health_router

__all__ = [
    "devices_router",
    "sensors_router",
    "health_router"
]
