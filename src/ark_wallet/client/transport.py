"""Node HTTP transport — resource calls against ``{host}/api/{path}``.

Async HTTP client shared by every operation of the node client. The target
(host + API version) is passed into each call rather than stored on the
client, so the same transport serves whatever the connection binding points
at when an operation is issued.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from ark_wallet.errors import NodeAPIError

if TYPE_CHECKING:
    from ark_wallet.client.connection import ConnectionTarget
    from ark_wallet.config.settings import ApiVersion

_DEFAULT_TIMEOUT = 30.0


def _endpoint(host: str, path: str) -> str:
    return f"{host.rstrip('/')}/api/{path.lstrip('/')}"


def _headers(api_version: ApiVersion | int, *, has_body: bool = False) -> dict[str, str]:
    headers = {
        "Accept": "application/json",
        "API-Version": str(int(api_version)),
    }
    if has_body:
        headers["Content-Type"] = "application/json"
    return headers


def _decode(response: httpx.Response, url: str) -> dict[str, Any]:
    """Return the JSON body of a 2xx response, raising NodeAPIError otherwise."""
    if response.status_code >= 400:
        msg = f"Node request {url} failed ({response.status_code}): {response.text[:200]}"
        raise NodeAPIError(msg, status_code=response.status_code)
    try:
        body = response.json()
    except ValueError as exc:
        msg = f"Node request {url} returned a non-JSON body"
        raise NodeAPIError(msg, status_code=response.status_code) from exc
    if not isinstance(body, dict):
        msg = f"Node request {url} returned {type(body).__name__}, expected an object"
        raise NodeAPIError(msg, status_code=response.status_code)
    return body


class NodeTransport:
    """Async HTTP client for the node REST API.

    Usage::

        transport = NodeTransport(timeout=10)
        await transport.connect()
        try:
            body = await transport.get(binding.target, "wallets/AXYZ")
        finally:
            await transport.close()
    """

    def __init__(self, *, timeout: float = _DEFAULT_TIMEOUT) -> None:
        """Initialize the transport.

        Args:
            timeout: Default timeout (seconds) for every request.
        """
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    @property
    def timeout(self) -> float:
        return self._timeout

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get(
        self,
        target: ConnectionTarget,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        """GET a resource from ``target``.

        Args:
            target: Snapshot of the connection target.
            path: Resource path below ``/api``.
            params: Query parameters.
            timeout: Overrides the transport timeout for this request.

        Raises:
            NodeAPIError: On connection errors, non-2xx answers or bad bodies.
        """
        return await self._request(
            target,
            "GET",
            path,
            params=params,
            timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
        )

    async def post(
        self,
        target: ConnectionTarget,
        path: str,
        json: dict[str, Any],
    ) -> dict[str, Any]:
        """POST a JSON body to a resource on ``target``.

        Raises:
            NodeAPIError: On connection errors, non-2xx answers or bad bodies.
        """
        return await self._request(target, "POST", path, json=json)

    async def fetch_json(self, url: str) -> Any:
        """GET an arbitrary JSON document (seed lists live outside any node).

        Raises:
            NodeAPIError: On connection errors, non-2xx answers or bad bodies.
        """
        client = self._ensure_connected()
        try:
            response = await client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            msg = f"Request {url} failed: {exc}"
            raise NodeAPIError(msg) from exc
        if response.status_code >= 400:
            msg = f"Request {url} failed ({response.status_code})"
            raise NodeAPIError(msg, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            msg = f"Request {url} returned a non-JSON body"
            raise NodeAPIError(msg, status_code=response.status_code) from exc

    @staticmethod
    async def probe(
        server: str,
        api_version: ApiVersion | int,
        path: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> dict[str, Any]:
        """GET ``path`` from ``server`` with a one-off client.

        Used to check a candidate server before binding to it; nothing about
        the shared transport is touched.

        Args:
            server: Base URL of the candidate node.
            api_version: API version to request.
            path: Resource path below ``/api``.
            timeout: Overrides the default timeout for this probe only.
            transport: Optional httpx transport (tests use a mock).
        """
        url = _endpoint(server, path)
        async with httpx.AsyncClient(
            timeout=timeout if timeout else _DEFAULT_TIMEOUT,
            transport=transport,
        ) as client:
            try:
                response = await client.get(url, headers=_headers(api_version))
            except httpx.HTTPError as exc:
                msg = f"Node probe {url} failed: {exc}"
                raise NodeAPIError(msg) from exc
        return _decode(response, url)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _request(
        self,
        target: ConnectionTarget,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        client = self._ensure_connected()
        url = _endpoint(target.host, path)
        try:
            response = await client.request(
                method,
                url,
                headers=_headers(target.api_version, has_body="json" in kwargs),
                **kwargs,
            )
        except httpx.HTTPError as exc:
            msg = f"Node request {url} failed: {exc}"
            raise NodeAPIError(msg) from exc
        return _decode(response, url)

    def _ensure_connected(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "NodeTransport is not connected, call connect() first"
            raise NodeAPIError(msg)
        return self._client
