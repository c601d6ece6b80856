"""
xhair FACEIT API Integration

Thin client for FACEIT's public Data API (v4). It performs authenticated
GETs and decodes the JSON envelopes FACEIT returns. FACEIT embeds an
`errors` list in its bodies, so a request that succeeded at the transport
level can still be a logical failure; decode_envelope() checks for that.
"""

from __future__ import annotations

import logging
from typing import TypeVar

import requests
from pydantic import ValidationError

from xhair.core.config import FaceitConfig
from xhair.core.errors import AuthError, NetworkError, NotFoundError, UpstreamError
from xhair.core.models import (
    FaceitEnvelope,
    HistoryEnvelope,
    MatchEnvelope,
    PlayerEnvelope,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=FaceitEnvelope)


def decode_envelope(raw: bytes, model: type[E]) -> E:
    """
    Parse a FACEIT response body into its envelope model.

    Raises:
        UpstreamError: body is not valid JSON for the model, or the envelope
            carries a non-empty `errors` list.
    """
    try:
        envelope = model.model_validate_json(raw)
    except ValidationError as e:
        raise UpstreamError(f"Malformed FACEIT response: {e.error_count()} validation error(s)") from e

    if envelope.errors:
        first = envelope.errors[0]
        logger.debug(f"FACEIT error envelope: code={first.code} http_status={first.http_status}")
        raise UpstreamError(first.message or "FACEIT returned an error")

    return envelope


class FaceitClient:
    """
    Client for the FACEIT Data API.

    Requires a FACEIT API key which can be obtained from:
    https://developers.faceit.com/

    Example:
        >>> from xhair.integrations.faceit import FaceitClient
        >>> client = FaceitClient(FaceitConfig(api_key="your-api-key"))
        >>> player = client.get_player_by_steam_id("76561198000000000")
        >>> history = client.get_player_history(player.player_id)
    """

    def __init__(self, config: FaceitConfig, session: requests.Session | None = None):
        self.config = config
        self._session = session

    def _get_session(self) -> requests.Session:
        """Get or create the requests session carrying the bearer credential."""
        if self._session is None:
            self._session = requests.Session()
        self._session.headers.update(
            {"Authorization": f"Bearer {self.config.api_key}", "Accept": "application/json"}
        )
        return self._session

    def get(self, path: str, params: dict | None = None) -> bytes:
        """
        GET a FACEIT endpoint and return the raw body.

        No retries are attempted.

        Raises:
            AuthError: no API key configured, or FACEIT rejected it
            NotFoundError: FACEIT answered 404 (unknown player or match)
            NetworkError: transport failure or any other non-2xx status
        """
        if not self.config.api_key:
            raise AuthError("FACEIT API key required")

        url = f"{self.config.base_url}{path}"
        logger.debug(f"FACEIT GET {url} params={params}")

        try:
            response = self._get_session().get(
                url, params=params, timeout=self.config.timeout_seconds
            )
        except requests.RequestException as e:
            raise NetworkError(f"FACEIT request failed: {e}") from e

        if response.status_code in (401, 403):
            raise AuthError(
                f"FACEIT rejected the API key ({response.status_code})",
                http_status=response.status_code,
            )
        if response.status_code == 404:
            raise NotFoundError(self._error_message(response))
        if not response.ok:
            raise NetworkError(
                self._error_message(response), http_status=response.status_code
            )

        return response.content

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the message from FACEIT's error envelope over the bare status."""
        try:
            envelope = FaceitEnvelope.model_validate_json(response.content)
            if envelope.errors and envelope.errors[0].message:
                return envelope.errors[0].message
        except ValidationError:
            pass
        return f"FACEIT request failed with status {response.status_code}"

    def get_player_by_steam_id(self, steam_id: str) -> PlayerEnvelope:
        raw = self.get("/players", params={"game": self.config.game, "game_player_id": steam_id})
        return decode_envelope(raw, PlayerEnvelope)

    def get_player_history(
        self, player_id: str, offset: int = 0, limit: int | None = None
    ) -> HistoryEnvelope:
        """
        Get a player's match history, most recent first.

        Args:
            player_id: FACEIT player ID
            offset: Offset for pagination
            limit: Window size (defaults to the configured lookback of 20)
        """
        raw = self.get(
            f"/players/{player_id}/history",
            params={
                "game": self.config.game,
                "offset": offset,
                "limit": limit or self.config.history_limit,
            },
        )
        return decode_envelope(raw, HistoryEnvelope)

    def get_match(self, match_id: str) -> MatchEnvelope:
        raw = self.get(f"/matches/{match_id}")
        return decode_envelope(raw, MatchEnvelope)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
