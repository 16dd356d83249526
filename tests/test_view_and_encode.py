import json
from dataclasses import dataclass
from random import Random
from typing import ClassVar

import pytest

from whoopie.encode import (
    event_to_dict,
    events_to_dicts,
    game_from_dict,
    game_to_dict,
    player_from_dict,
    player_to_dict,
    player_view_to_dict,
)
from whoopie.errors import PlayerNotFound
from whoopie.events import StanzaStarted
from whoopie.game import get_valid_actions, place_bid, play_card, start_game
from whoopie.state import AIDifficulty, AIPlayer, GamePhase, HumanPlayer
from whoopie.view import get_player_view

from tables import card, dealt_game, seated_game


def test_player_view_shows_only_own_hand():
    game = dealt_game([["A♥", "2♣"], ["K♥", "3♣"], ["2♠", "Q♥"]], "7♠", dealer=2, phase=GamePhase.BIDDING)
    view = get_player_view(game, 1)

    assert view.my_index == 1
    assert view.stanza.my_hand == (card("K♥"), card("3♣"))
    assert view.stanza.other_hand_counts == (2, 2, 2)
    assert not hasattr(view.stanza, "hands")
    assert not hasattr(view.stanza, "undealt")
    assert view.valid_bids == ()

    on_turn = get_player_view(game, 0)
    assert on_turn.valid_bids == (0, 1, 2)

    encoded = player_view_to_dict(view)
    assert encoded["phase"] == "bidding"
    assert "hands" not in encoded["stanza"]
    assert encoded["stanza"]["my_hand"] == [
        {"type": "suit", "suit": "hearts", "rank": "K"},
        {"type": "suit", "suit": "clubs", "rank": "3"},
    ]


def test_player_view_rejects_unknown_seat():
    game = seated_game(2)
    assert get_player_view(game, 1).stanza is None
    with pytest.raises(PlayerNotFound):
        get_player_view(game, 2)
    with pytest.raises(PlayerNotFound):
        get_player_view(game, -1)


def test_mid_game_snapshot_round_trips_through_json():
    game = start_game(seated_game(3), rng=Random(21)).game
    for _ in range(3):
        seat = game.stanza.current_player_index
        game = place_bid(game, seat, get_valid_actions(game).can_bid[0]).game
    seat = game.stanza.current_player_index
    game = play_card(game, seat, game.stanza.hands[seat][0]).game

    payload = json.loads(json.dumps(game_to_dict(game)))
    assert game_from_dict(payload) == game


def test_players_encode_with_their_kind():
    bot = AIPlayer(id="b", name="Bot", difficulty=AIDifficulty.EXPERT)
    assert player_to_dict(bot)["difficulty"] == "expert"
    assert player_from_dict(player_to_dict(bot)) == bot
    human = HumanPlayer(id="h", name="Human", is_connected=False)
    assert player_from_dict(player_to_dict(human)) == human
    with pytest.raises(ValueError):
        player_from_dict({"type": "ghost", "id": "x", "name": "x"})


def test_stanza_started_event_is_redacted_per_seat():
    transition = start_game(seated_game(3), rng=Random(5))
    started = [event for event in transition.events if isinstance(event, StanzaStarted)][0]

    full = event_to_dict(started)
    assert len(full["stanza"]["hands"]) == 3

    seat_view = event_to_dict(started, perspective=2)
    assert "hands" not in seat_view["stanza"]
    assert len(seat_view["stanza"]["my_hand"]) == 1
    assert seat_view["stanza"]["other_hand_counts"] == [1, 1, 1]

    assert [event["type"] for event in events_to_dicts(list(transition.events), perspective=0)] == [
        "gameStarted",
        "cutForDealer",
        "stanzaStarted",
    ]


@dataclass(frozen=True)
class TableTalk:
    type: ClassVar[str] = "tableTalk"


def test_unknown_events_are_rejected():
    with pytest.raises(TypeError):
        event_to_dict(TableTalk())
