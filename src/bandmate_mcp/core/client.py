"""
Bandmate REST API client.

One logical backend operation maps to one HTTP request and one parsed JSON
response. The client:
- always sends a JSON content type
- attaches the configured bearer token on authenticated calls
- raises ApiError on any non-2xx status, without retrying

Environment Variables:
- BANDMATE_API_URL: Backend base URL
- BANDMATE_AUTH_TOKEN: Bearer token for authenticated calls
- BANDMATE_AUTH_POLICY: open (send unauthenticated) or closed (refuse)
"""
from __future__ import annotations

from time import perf_counter
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from bandmate_mcp.config import AuthPolicy, BackendConfig, get_config

from .errors import ApiError, AuthConfigurationError
from .models import ArtistUpsert, ListUpsert, SongQuery, SongUpsert
from .observability import get_logger

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class BandmateClient:
    """Async client for the Bandmate REST API.

    The underlying httpx.AsyncClient is created on first use and shared by
    every call; pass one in to control the transport (tests use
    httpx.MockTransport).

    Example:
        client = BandmateClient()
        song = await client.get_song("abc123")
        await client.aclose()
    """

    def __init__(
        self,
        config: BackendConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or get_config().backend
        self._http = http_client
        self._owns_http = http_client is None
        self._logger = get_logger("bandmate-mcp.client")

    @property
    def base_url(self) -> str:
        return self._config.api_url

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient()
        return self._http

    def _headers(self, endpoint: str, requires_auth: bool) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if not requires_auth:
            return headers

        if self._config.has_token:
            headers["Authorization"] = f"Bearer {self._config.auth_token}"
        elif self._config.auth_policy == AuthPolicy.CLOSED:
            raise AuthConfigurationError(endpoint)
        else:
            self._logger.warning(
                "Authenticated call without a configured token, sending unauthenticated",
                endpoint=endpoint,
            )
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        requires_auth: bool = False,
    ) -> Any:
        """Issue one request against the backend and return the parsed JSON.

        Args:
            endpoint: Path relative to the API base URL, including any query string
            method: HTTP method
            body: JSON-serializable payload, sent only for POST/PUT/PATCH
            requires_auth: Attach the bearer token if one is configured

        Returns:
            The decoded JSON response body

        Raises:
            ApiError: The backend answered with a non-2xx status
            AuthConfigurationError: Auth required, no token, closed policy
        """
        method = method.upper()
        headers = self._headers(endpoint, requires_auth)

        payload = body if method in _BODY_METHODS else None

        url = f"{self._config.api_url}{endpoint}"
        t_start = perf_counter()
        response = await self._get_http().request(
            method, url, headers=headers, json=payload
        )
        latency_ms = (perf_counter() - t_start) * 1000

        if not response.is_success:
            error = ApiError(response.status_code, response.text, endpoint=endpoint)
            self._logger.warning(
                "Bandmate API call failed",
                method=method,
                latency_ms=round(latency_ms, 1),
                suggestion=error.suggestion,
                **error.to_dict(),
            )
            raise error

        self._logger.info(
            "Bandmate API call",
            method=method,
            endpoint=endpoint,
            status=response.status_code,
            latency_ms=round(latency_ms, 1),
        )
        return response.json()

    # ------------------------------------------------------------------
    # Songs
    # ------------------------------------------------------------------

    async def list_songs(self, query: SongQuery | None = None) -> Any:
        params = query.to_params() if query else {}
        return await self.request(_with_query("/songs", params))

    async def get_song(self, song_id: str) -> Any:
        return await self.request(f"/songs/{_segment(song_id)}")

    async def get_songs_by_user(self, user_id: str) -> Any:
        return await self.request(f"/songs/user/{_segment(user_id)}")

    async def get_songs_in_list(self, list_id: str) -> Any:
        return await self.request(f"/songs/list/{_segment(list_id)}")

    async def upsert_song(self, song: SongUpsert) -> Any:
        return await self.request("/songs", "POST", song.to_wire())

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    async def list_lists(self, user_id: str | None = None) -> Any:
        params = {"userId": user_id} if user_id else {}
        return await self.request(_with_query("/lists", params))

    async def get_list(self, list_id: str) -> Any:
        return await self.request(f"/lists/{_segment(list_id)}")

    async def upsert_list(self, song_list: ListUpsert) -> Any:
        return await self.request("/lists", "POST", song_list.to_wire(), requires_auth=True)

    # ------------------------------------------------------------------
    # Artists
    # ------------------------------------------------------------------

    async def list_artists(self) -> Any:
        return await self.request("/artists")

    async def upsert_artist(self, artist: ArtistUpsert) -> Any:
        return await self.request("/artists", "POST", artist.to_wire())

    async def aclose(self) -> None:
        """Close the shared HTTP client if this instance created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None


def _segment(value: str) -> str:
    return quote(value, safe="")


def _with_query(path: str, params: dict[str, str]) -> str:
    if not params:
        return path
    return f"{path}?{urlencode(params)}"

