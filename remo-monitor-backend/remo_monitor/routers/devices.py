from fastapi import APIRouter, Depends
from typing import List, Dict, Any
import logging

from remo_monitor.errors import NoDevicesError
from remo_monitor.providers.nature_remo_provider import NatureRemoProvider, get_nature_remo_provider
from remo_monitor.schemas.nature_remo import DeviceInfo

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["devices"])

NO_DEVICES_MESSAGE = "No devices found. Please check your Nature Remo setup."

@router.get("/devices", response_model=List[DeviceInfo])
async def list_devices(provider: NatureRemoProvider = Depends(get_nature_remo_provider)):
    """Get device metadata and latest values straight from Nature Remo"""
    devices = await provider.get_devices()
    if not devices:
        raise NoDevicesError(NO_DEVICES_MESSAGE)
    return [DeviceInfo.from_snapshot(device) for device in devices]

@router.get("/temperature")
async def get_temperature(provider: NatureRemoProvider = Depends(get_nature_remo_provider)) -> List[Dict[str, Any]]:
    """Get the raw Nature Remo device list"""
    devices = await provider.fetch_devices_raw()
    if not devices:
        raise NoDevicesError(NO_DEVICES_MESSAGE)
    return devices
