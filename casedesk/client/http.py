"""
Async HTTP client for the CaseDesk API.

Every call resolves to an ``ApiResult``: transport failures, non-2xx
statuses and unparsable bodies become an ``error`` string instead of an
exception. Nothing is retried.
"""

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog
from pydantic_core import to_jsonable_python

from casedesk.client.session import SessionStore
from casedesk.client.uploads import filename_from_content_disposition

logger = structlog.get_logger()

NETWORK_ERROR = "Network error. Please try again."


@dataclass
class ApiResult:
    """Outcome of one request."""

    data: Any = None
    error: str | None = None
    status_code: int | None = None
    body: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DownloadedFile:
    content: bytes
    file_name: str
    mime_type: str
    headers: dict[str, str] = field(default_factory=dict)


def error_message(body: Any, status_code: int) -> str:
    """Best message a failed response carries."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        if isinstance(error, str) and error:
            return error
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return f"Request failed with status {status_code}"


def parse_body(response: httpx.Response) -> tuple[Any, str | None]:
    """Decode a JSON body; an empty body decodes to None."""
    text = response.text
    if not text or not text.strip():
        return None, None
    try:
        return json.loads(text), None
    except ValueError:
        logger.warning("invalid json from api", status_code=response.status_code)
        return None, f"Server returned invalid JSON (status: {response.status_code})"


def clean_params(params: dict[str, Any] | None) -> dict[str, str] | None:
    """Drop unset filters and render the rest as query strings."""
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(to_jsonable_python(value))
    return cleaned


class ApiClient:
    """
    Thin request helper bound to a base URL and a ``SessionStore``.

    The bearer token is read from the session on every request, and a 401
    response invalidates the session so the portal can send the user back
    to the login screen.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionStore | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionStore()
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        return headers

    async def _send(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> httpx.Response | None:
        try:
            response = await self._client.request(
                method,
                endpoint,
                params=clean_params(params),
                json=to_jsonable_python(json_body) if json_body is not None else None,
                files=files,
                data=clean_params(data),
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning("api request failed", method=method, endpoint=endpoint, error=str(e))
            return None

        if response.status_code == 401:
            self.session.invalidate()
        return response

    async def request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ApiResult:
        """Send a request and unwrap the ``data`` member of the JSON envelope."""
        response = await self._send(method, endpoint, params, json_body, files, data)
        if response is None:
            return ApiResult(error=NETWORK_ERROR)

        body, parse_error = parse_body(response)
        if parse_error:
            return ApiResult(error=parse_error, status_code=response.status_code)

        if not response.is_success:
            return ApiResult(
                error=error_message(body, response.status_code),
                status_code=response.status_code,
                body=body,
            )

        payload = body.get("data") if isinstance(body, dict) and "success" in body else body
        return ApiResult(data=payload, status_code=response.status_code, body=body)

    async def get(self, endpoint: str, **params: Any) -> ApiResult:
        return await self.request("GET", endpoint, params=params)

    async def post(self, endpoint: str, json_body: Any = None) -> ApiResult:
        return await self.request("POST", endpoint, json_body=json_body)

    async def put(self, endpoint: str, json_body: Any = None) -> ApiResult:
        return await self.request("PUT", endpoint, json_body=json_body)

    async def delete(self, endpoint: str) -> ApiResult:
        return await self.request("DELETE", endpoint)

    async def download(self, endpoint: str, fallback_name: str = "download") -> ApiResult:
        """Fetch a binary body; ``data`` is a ``DownloadedFile``."""
        response = await self._send("GET", endpoint)
        if response is None:
            return ApiResult(error=NETWORK_ERROR)

        if not response.is_success:
            body, parse_error = parse_body(response)
            return ApiResult(
                error=parse_error or error_message(body, response.status_code),
                status_code=response.status_code,
                body=body,
            )

        downloaded = DownloadedFile(
            content=response.content,
            file_name=filename_from_content_disposition(
                response.headers.get("content-disposition"), fallback_name
            ),
            mime_type=response.headers.get("content-type", "application/octet-stream"),
            headers=dict(response.headers),
        )
        return ApiResult(data=downloaded, status_code=response.status_code)
