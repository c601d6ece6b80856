"""
Match resolution: steam identity -> FACEIT player -> latest eligible match -> demo URL.
"""

from __future__ import annotations

import logging

from xhair.core.errors import InactivePlayerError, NoEligibleMatchError, NotFoundError
from xhair.core.models import MatchDetail, MatchSummary, PlatformPlayer
from xhair.integrations.faceit import FaceitClient

logger = logging.getLogger(__name__)


class MatchResolver:
    """Resolves a steam identity to the match whose demo should be scanned."""

    def __init__(self, client: FaceitClient):
        self.client = client

    def resolve_player(self, steam_id: str) -> PlatformPlayer:
        """
        Look up the FACEIT player for a steam identity and attach their history.

        Raises:
            NotFoundError: no FACEIT player, or no matches inside the lookback window
            UpstreamError / NetworkError: from the client
        """
        envelope = self.client.get_player_by_steam_id(steam_id)
        if not envelope.player_id:
            raise NotFoundError(f"No FACEIT player for steam id {steam_id}")

        history = self.client.get_player_history(envelope.player_id)
        player = PlatformPlayer(
            player_id=envelope.player_id,
            nickname=envelope.nickname or "",
            history=[
                MatchSummary(match_id=item.match_id, competition_type=item.competition_type or "")
                for item in history.items
            ],
        )
        logger.info(
            f"Resolved {steam_id} to FACEIT player {player.nickname or player.player_id} "
            f"({len(player.history)} recent matches)"
        )

        if not player.history:
            raise InactivePlayerError(f"Player {steam_id} has no matches in the lookback window")
        return player

    @staticmethod
    def select_latest_eligible_match(player: PlatformPlayer) -> str:
        """
        Return the most recent non-championship match ID.

        Raises:
            NoEligibleMatchError: every entry is a championship match (or has no ID)
        """
        for summary in player.history:
            if summary.is_championship or not summary.match_id:
                continue
            return summary.match_id

        raise NoEligibleMatchError(
            f"None of {len(player.history)} recent matches is a non-championship match"
        )

    def resolve_match(self, match_id: str) -> MatchDetail:
        """
        Fetch match details and require a demo URL.

        Raises:
            NotFoundError: the match has no demo URL
        """
        envelope = self.client.get_match(match_id)
        urls = [url for url in (envelope.demo_url or []) if url and url.strip()]
        if not urls:
            raise NotFoundError(f"Match {match_id} has no demo available")
        return MatchDetail(match_id=envelope.match_id or match_id, demo_urls=urls)

    def resolve(self, steam_id: str) -> tuple[PlatformPlayer, MatchDetail]:
        """Run the three resolution steps in order."""
        player = self.resolve_player(steam_id)
        match_id = self.select_latest_eligible_match(player)
        return player, self.resolve_match(match_id)
