"""Tests for match resolution."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from xhair.core.errors import (
    InactivePlayerError,
    NoEligibleMatchError,
    NotFoundError,
    UpstreamError,
)
from xhair.core.models import (
    HistoryEnvelope,
    HistoryItem,
    MatchEnvelope,
    MatchSummary,
    PlatformPlayer,
    PlayerEnvelope,
)
from xhair.core.config import FaceitConfig
from xhair.integrations.faceit import FaceitClient
from xhair.pipeline.resolver import MatchResolver


def _client(player=None, history=None, match=None) -> MagicMock:
    client = MagicMock()
    client.get_player_by_steam_id.return_value = player or PlayerEnvelope(
        player_id="p-1", nickname="tester"
    )
    client.get_player_history.return_value = history or HistoryEnvelope()
    client.get_match.return_value = match or MatchEnvelope()
    return client


def _history(*entries: tuple[str, str]) -> HistoryEnvelope:
    return HistoryEnvelope(
        items=[HistoryItem(match_id=mid, competition_type=ctype) for mid, ctype in entries]
    )


def _player(*entries: tuple[str, str]) -> PlatformPlayer:
    return PlatformPlayer(
        player_id="p-1",
        history=[MatchSummary(match_id=mid, competition_type=ctype) for mid, ctype in entries],
    )


class TestResolvePlayer:
    """Tests for MatchResolver.resolve_player()."""

    def test_builds_player_with_history(self):
        client = _client(history=_history(("m-1", "matchmaking"), ("m-2", "championship")))
        player = MatchResolver(client).resolve_player("111")

        assert player.player_id == "p-1"
        assert player.nickname == "tester"
        assert [m.match_id for m in player.history] == ["m-1", "m-2"]
        client.get_player_history.assert_called_once_with("p-1")

    def test_empty_history_is_not_found(self):
        client = _client(history=HistoryEnvelope(items=[]))
        with pytest.raises(InactivePlayerError):
            MatchResolver(client).resolve_player("222")

    def test_inactive_player_is_a_not_found(self):
        assert issubclass(InactivePlayerError, NotFoundError)

    def test_missing_player_id_is_not_found(self):
        client = _client(player=PlayerEnvelope(player_id=""))
        with pytest.raises(NotFoundError):
            MatchResolver(client).resolve_player("333")
        client.get_player_history.assert_not_called()

    def test_upstream_error_propagates(self):
        client = _client()
        client.get_player_by_steam_id.side_effect = UpstreamError("The resource was not found.")
        with pytest.raises(UpstreamError):
            MatchResolver(client).resolve_player("444")

    def test_null_competition_type_becomes_empty(self):
        history = HistoryEnvelope(items=[HistoryItem(match_id="m-1", competition_type=None)])
        player = MatchResolver(_client(history=history)).resolve_player("111")
        assert player.history[0].competition_type == ""


class TestSelectLatestEligibleMatch:
    """Tests for MatchResolver.select_latest_eligible_match()."""

    def test_first_entry_eligible(self):
        player = _player(("m-1", "matchmaking"), ("m-2", "matchmaking"))
        assert MatchResolver.select_latest_eligible_match(player) == "m-1"

    def test_skips_leading_championships(self):
        player = _player(("m-1", "championship"), ("m-2", "championship"), ("m-3", "hub"), ("m-4", "matchmaking"))
        assert MatchResolver.select_latest_eligible_match(player) == "m-3"

    def test_only_championships_raises(self):
        player = _player(("m-1", "championship"), ("m-2", "championship"))
        with pytest.raises(NoEligibleMatchError):
            MatchResolver.select_latest_eligible_match(player)

    def test_empty_history_raises(self):
        with pytest.raises(NoEligibleMatchError):
            MatchResolver.select_latest_eligible_match(_player())

    def test_never_returns_empty_id(self):
        player = _player(("", "matchmaking"), ("m-2", "matchmaking"))
        assert MatchResolver.select_latest_eligible_match(player) == "m-2"

    def test_blank_competition_type_is_eligible(self):
        player = _player(("m-1", ""))
        assert MatchResolver.select_latest_eligible_match(player) == "m-1"


class TestResolveMatch:
    """Tests for MatchResolver.resolve_match()."""

    def test_returns_first_demo_url(self):
        match = MatchEnvelope(match_id="m-1", demo_url=["https://a/1.dem.gz", "https://b/1.dem.gz"])
        detail = MatchResolver(_client(match=match)).resolve_match("m-1")

        assert detail.match_id == "m-1"
        assert detail.demo_url == "https://a/1.dem.gz"

    @pytest.mark.parametrize("urls", [[], None, ["", "  "]])
    def test_no_demo_url_is_not_found(self, urls):
        match = MatchEnvelope(match_id="m-1", demo_url=urls)
        with pytest.raises(NotFoundError):
            MatchResolver(_client(match=match)).resolve_match("m-1")

    def test_falls_back_to_requested_id(self):
        match = MatchEnvelope(match_id="", demo_url=["https://a/1.dem.gz"])
        detail = MatchResolver(_client(match=match)).resolve_match("m-9")
        assert detail.match_id == "m-9"


class TestResolve:
    """Tests for the composed MatchResolver.resolve()."""

    def test_resolves_latest_eligible_match(self):
        client = _client(
            history=_history(("m-1", "championship"), ("m-2", "matchmaking")),
            match=MatchEnvelope(match_id="m-2", demo_url=["https://a/2.dem.gz"]),
        )
        player, detail = MatchResolver(client).resolve("111")

        assert player.player_id == "p-1"
        assert detail.match_id == "m-2"
        client.get_match.assert_called_once_with("m-2")


def _not_found_client() -> FaceitClient:
    response = MagicMock()
    response.status_code = 404
    response.ok = False
    response.content = json.dumps(
        {"errors": [{"message": "The resource was not found.", "code": "err_nf0", "http_status": 404}]}
    ).encode()
    session = requests.Session()
    session.get = MagicMock(return_value=response)
    return FaceitClient(FaceitConfig(api_key="test-key"), session=session)


class TestPlatformNotFound:
    """FACEIT 404 answers surface as NotFoundError."""

    def test_unknown_steam_id(self):
        with pytest.raises(NotFoundError) as exc_info:
            MatchResolver(_not_found_client()).resolve_player("76561198000000001")
        assert exc_info.value.status_code == 404

    def test_unknown_match(self):
        with pytest.raises(NotFoundError) as exc_info:
            MatchResolver(_not_found_client()).resolve_match("1-missing")
        assert exc_info.value.status_code == 404
