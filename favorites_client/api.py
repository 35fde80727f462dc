"""Thin async HTTP client over the favorites API endpoints."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from favorites_client.config import ClientSettings
from favorites_client.errors import ApiResponseError, NetworkError

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Extract the server's short error message, tolerating non-JSON bodies."""

    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase or "Request failed"
    if isinstance(payload, Mapping):
        message = payload.get("message") or payload.get("error")
        if message:
            return str(message)
    return response.reason_phrase or "Request failed"


def _field(payload: Any, key: str, path: str) -> Any:
    """Read ``key`` from a success body, treating an unexpected shape as a failure."""

    if not isinstance(payload, Mapping) or key not in payload:
        raise NetworkError(f"GET {path} response is missing '{key}'")
    return payload[key]


class FavoritesApiClient:
    """One method per endpoint; every failure surfaces as :class:`NetworkError`.

    An ``httpx.AsyncClient`` may be injected and is then left open for its
    owner. Otherwise one is created from :class:`ClientSettings`, optionally
    over a custom ``transport``, and closed by :meth:`aclose`.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or ClientSettings.from_env()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.api_base_url.rstrip("/"),
            timeout=self._settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> FavoritesApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise ApiResponseError(response.status_code, _error_message(response))

        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(f"{method} {path} returned invalid JSON") from exc

    async def list_favorites(self) -> list[dict[str, Any]]:
        payload = await self._request("GET", "/favorites")
        if not isinstance(payload, list):
            raise NetworkError("GET /favorites returned a non-list body")
        return payload

    async def add_favorite(self, movie: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/favorites", json=dict(movie))

    async def remove_favorite(self, movie_id: int) -> dict[str, Any]:
        return await self._request("DELETE", f"/favorites/{movie_id}")

    async def check_favorite(self, movie_id: int) -> bool:
        path = f"/favorites/{movie_id}"
        payload = await self._request("GET", path)
        is_favorite = _field(payload, "isFavorite", path)
        if not isinstance(is_favorite, bool):
            raise NetworkError(f"GET {path} returned a non-boolean isFavorite")
        return is_favorite

    async def count_favorites(self) -> int:
        path = "/favorites/stats/count"
        payload = await self._request("GET", path)
        count = _field(payload, "count", path)
        if isinstance(count, bool) or not isinstance(count, int):
            raise NetworkError(f"GET {path} returned a non-integer count")
        return count

    async def health(self) -> dict[str, Any]:
        return await self._request("GET", "/health")
