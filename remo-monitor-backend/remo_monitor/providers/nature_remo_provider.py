import logging
from typing import Dict, Any, List, Optional
import httpx
from pydantic import ValidationError

from remo_monitor.database import settings, get_utc_datetime
from remo_monitor.errors import ConfigError, UpstreamError
from remo_monitor.schemas.nature_remo import DeviceSnapshot

logger = logging.getLogger(__name__)

DEFAULT_API_ENDPOINT = "https://api.nature.global/1"

class NatureRemoProvider:
    """Provider for Nature Remo sensor hubs using the Nature Remo Cloud API"""

    def __init__(
        self,
        access_token: Optional[str],
        api_endpoint: str = DEFAULT_API_ENDPOINT,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.api_endpoint = (api_endpoint or DEFAULT_API_ENDPOINT).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    async def fetch_devices_raw(self) -> List[Dict[str, Any]]:
        """Get the device list exactly as the Nature Remo API returns it"""
        if not self.access_token:
            raise ConfigError(
                "Nature Remo access token is not set. Please set NATURE_REMO_ACCESS_TOKEN in your environment variables."
            )

        url = f"{self.api_endpoint}/devices"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Error calling Nature Remo API {url}: {str(e)}")
            raise UpstreamError(f"Failed to fetch devices from Nature Remo API: {str(e)}") from e

        if not response.is_success:
            logger.error(f"Nature Remo API returned {response.status_code}: {response.text}")
            raise UpstreamError(
                f"Failed to fetch devices from Nature Remo API: "
                f"{response.status_code} {response.reason_phrase} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            devices = response.json()
        except ValueError as e:
            logger.error(f"Nature Remo API returned a non-JSON body: {response.text}")
            raise UpstreamError("Nature Remo API returned an invalid response body", response.status_code, response.text) from e

        if not isinstance(devices, list):
            logger.error(f"Nature Remo API returned {type(devices).__name__} instead of a device list")
            raise UpstreamError("Nature Remo API returned an invalid response body", response.status_code, response.text)

        logger.debug(f"Fetched {len(devices)} device(s) from Nature Remo")
        return devices

    async def get_devices(self) -> List[DeviceSnapshot]:
        """Get the device list parsed into snapshots; an empty list is a valid result"""
        raw_devices = await self.fetch_devices_raw()
        try:
            return [DeviceSnapshot.model_validate(device) for device in raw_devices]
        except ValidationError as e:
            logger.error(f"Unexpected device payload from Nature Remo API: {str(e)}")
            raise UpstreamError(f"Unexpected device payload from Nature Remo API: {str(e)}") from e

    async def health_check(self) -> Dict[str, Any]:
        """Check if the Nature Remo API is reachable with the configured token"""
        try:
            devices = await self.fetch_devices_raw()
            return {
                "success": True,
                "provider": "NatureRemoProvider",
                "device_count": len(devices),
                "timestamp": get_utc_datetime().isoformat()
            }
        except (ConfigError, UpstreamError) as e:
            return {
                "success": False,
                "provider": "NatureRemoProvider",
                "error": e.message,
                "timestamp": get_utc_datetime().isoformat()
            }

def get_nature_remo_provider() -> NatureRemoProvider:
    """Get a provider configured from the environment"""
    return NatureRemoProvider(
        settings.nature_remo_access_token,
        settings.nature_remo_api_endpoint,
        settings.nature_remo_timeout,
    )
