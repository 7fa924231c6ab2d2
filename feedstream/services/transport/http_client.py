import httpx
import structlog

from feedstream import __version__
from feedstream.core.exceptions import RemoteAPIError
from feedstream.services.transport.base import QueryParams, Transport

logger = structlog.get_logger()


def _encode_query(qs: QueryParams | None) -> dict[str, str | int | float]:
    """httpx renders bools as "True"/"False"; the API expects lowercase."""
    params = {}
    for key, value in (qs or {}).items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        params[key] = value
    return params


class HTTPTransport(Transport):
    def __init__(
        self,
        api_key: str,
        base_url: str,
        api_version: str = "v1.0",
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = f"{base_url.rstrip('/')}/api/{api_version}/"
        self._headers = {
            "stream-auth-type": "jwt",
            "X-Stream-Client": f"feedstream-python-{__version__}",
        }
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(connect=5.0, read=30.0, write=5.0, pool=5.0)
        )

    async def post(self, url: str, signature: str, body: dict | list | None = None, qs: QueryParams | None = None) -> dict:
        return await self._request("POST", url, signature, qs=qs, body=body)

    async def get(self, url: str, signature: str, qs: QueryParams | None = None) -> dict:
        return await self._request("GET", url, signature, qs=qs)

    async def delete(self, url: str, signature: str, qs: QueryParams | None = None) -> dict:
        return await self._request("DELETE", url, signature, qs=qs)

    async def close(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        signature: str,
        qs: QueryParams | None = None,
        body: dict | list | None = None,
    ) -> dict:
        full_url = f"{self.base_url}{url}"
        params = {**_encode_query(qs), "api_key": self.api_key}
        headers = {**self._headers, "Authorization": signature}

        logger.debug("feed_request", method=method, url=url)
        try:
            response = await self._client.request(method, full_url, params=params, json=body, headers=headers)
        except httpx.ConnectError as e:
            raise RemoteAPIError(f"Cannot connect to feed API at {self.base_url}: {e}", code="api_unreachable")
        except httpx.TimeoutException:
            raise RemoteAPIError("Feed API request timed out.", code="api_unreachable")

        if response.status_code >= 400:
            raise self._error_from_response(method, url, response)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.warning("invalid_response_body", method=method, url=url, status=response.status_code)
            raise RemoteAPIError(
                f"Feed API returned a non-JSON body for {method} {url}",
                error={"detail": response.text},
                response=response,
            )

    @staticmethod
    def _error_from_response(method: str, url: str, response: httpx.Response) -> RemoteAPIError:
        try:
            payload = response.json()
        except ValueError:
            payload = {"detail": response.text}
        if not isinstance(payload, dict):
            payload = {"detail": payload}

        logger.warning(
            "remote_api_error",
            method=method,
            url=url,
            status=response.status_code,
            error_type=payload.get("exception"),
        )
        message = payload.get("detail") or f"{response.status_code} returned by {method} {url}"
        return RemoteAPIError(str(message), error=payload, response=response)
