# rateorant/utils/http_client.py
import asyncio
import aiohttp
import logging
from typing import Optional, Dict, Any, List
from ..config import config
import json

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Backend call failed: HTTP status, connection error or unparsable body"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        detail: Any = None,
        body: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail
        self.body = body

    def user_message(self, fallback: str) -> str:
        """The backend's own detail text when it sent one, otherwise ``fallback``"""
        if isinstance(self.detail, str) and self.detail:
            return self.detail
        return fallback

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.status_code}: {self.message}"
        return self.message


def normalize_list(payload: Any, *keys: str) -> Optional[List[Any]]:
    """Bare list or a list wrapped under one of ``keys``; None for anything else."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return None


def auth_headers(token: Optional[str]) -> Dict[str, str]:
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


class HTTPClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        self.session: Optional[aiohttp.ClientSession] = None
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout = timeout or config.REQUEST_TIMEOUT
        logger.info(f"HTTP client initialized. Base URL: {self.base_url}")

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"Content-Type": "application/json"}
            )
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()

    async def request(
        self,
        method: str,
        endpoint: str,
        token: Optional[str] = None,
        **kwargs
    ) -> Any:
        """Send a request and return the parsed JSON body, raising APIError on failure"""
        session = await self._get_session()
        url = f"{self.base_url}{endpoint}"
        headers = {**kwargs.pop("headers", {}), **auth_headers(token)}

        try:
            logger.debug(f"{method} {endpoint} params={kwargs.get('params')} json={kwargs.get('json')}")

            async with session.request(method, url, headers=headers, **kwargs) as response:
                response_text = await response.text()
                logger.debug(f"Raw response ({response.status}): {response_text[:200]}")

                if 200 <= response.status < 300:
                    if not response_text.strip():
                        return {}
                    try:
                        return json.loads(response_text)
                    except json.JSONDecodeError:
                        logger.error(f"Failed to parse JSON from {endpoint}: {response_text[:100]}")
                        raise APIError(
                            "The server returned an invalid response",
                            status_code=response.status,
                            body=response_text[:100]
                        )

                logger.warning(f"HTTP {response.status} from {method} {endpoint}: {response_text[:200]}")
                try:
                    error_data = json.loads(response_text)
                except json.JSONDecodeError:
                    error_data = None

                detail = error_data.get("detail") if isinstance(error_data, dict) else None
                if isinstance(detail, str) and detail:
                    message = detail
                else:
                    message = f"Request failed with status {response.status}"

                raise APIError(message, status_code=response.status, detail=detail, body=response_text)

        except aiohttp.ClientError as e:
            logger.error(f"Connection error to {endpoint}: {e}")
            raise APIError("Could not connect to the server", body=str(e)) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout after {self.timeout}s waiting for {endpoint}")
            raise APIError("The server took too long to respond", body="timeout") from e

    async def get(self, endpoint: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request("GET", endpoint, token=token, **kwargs)

    async def post(self, endpoint: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request("POST", endpoint, token=token, **kwargs)

    async def put(self, endpoint: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request("PUT", endpoint, token=token, **kwargs)

    async def delete(self, endpoint: str, token: Optional[str] = None, **kwargs) -> Any:
        return await self.request("DELETE", endpoint, token=token, **kwargs)

    async def check_api_health(self) -> bool:
        """Probe the backend with the public categories endpoint"""
        try:
            await self.get("/categories")
            return True
        except APIError as e:
            logger.warning(f"API health check failed: {e}")
            return False


# Global instance
http_client = HTTPClient()
