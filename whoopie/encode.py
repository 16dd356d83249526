"""JSON-safe encoding of game state, player views and events.

``game_to_dict`` / ``game_from_dict`` round-trip a full ``GameState`` so a
host can snapshot a paused game. Views and events are encode-only.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .cards import (
    deserialize_card,
    deserialize_rank,
    deserialize_suit,
    serialize_card,
    serialize_rank,
    serialize_suit,
)
from .events import (
    BidPlaced,
    CardPlayed,
    CutForDealer,
    GameEnded,
    GameEvent,
    GameStarted,
    PlayerJoined,
    PlayerLeft,
    StanzaCompleted,
    StanzaRedealt,
    StanzaStarted,
    TrickCompleted,
    WhoopieCallMissed,
)
from .settings import settings_from_dict, settings_to_dict
from .state import (
    AIDifficulty,
    AIPlayer,
    CompletedStanzaRecord,
    GamePhase,
    GameState,
    HumanPlayer,
    Player,
    StanzaState,
)
from .trick import CompletedTrick, PlayedCard
from .view import PlayerView, StanzaView, redact_stanza


# Players -----------------------------------------------------------------


def player_to_dict(player: Player) -> Dict[str, Any]:
    if isinstance(player, AIPlayer):
        return {"type": "ai", "id": player.id, "name": player.name, "difficulty": str(player.difficulty)}
    return {"type": "human", "id": player.id, "name": player.name, "is_connected": player.is_connected}


def player_from_dict(payload: Mapping[str, Any]) -> Player:
    kind = payload.get("type")
    if kind == "ai":
        difficulty = str(payload.get("difficulty", "beginner")).upper()
        if difficulty not in AIDifficulty.__members__:
            raise ValueError(f"Unknown AI difficulty: {payload.get('difficulty')!r}")
        return AIPlayer(id=payload["id"], name=payload["name"], difficulty=AIDifficulty[difficulty])
    if kind == "human":
        return HumanPlayer(id=payload["id"], name=payload["name"], is_connected=bool(payload.get("is_connected", True)))
    raise ValueError(f"Unknown player type: {kind!r}")


# Tricks ------------------------------------------------------------------


def played_card_to_dict(played: PlayedCard) -> Dict[str, Any]:
    return {
        "card": serialize_card(played.card),
        "player_id": played.player_id,
        "player_index": played.player_index,
        "trump_suit_at_play": serialize_suit(played.trump_suit_at_play),
        "j_trump_active_at_play": played.j_trump_active_at_play,
        "was_whoopie": played.was_whoopie,
        "was_scramble": played.was_scramble,
    }


def played_card_from_dict(payload: Mapping[str, Any]) -> PlayedCard:
    return PlayedCard(
        card=deserialize_card(payload["card"]),
        player_id=payload["player_id"],
        player_index=payload["player_index"],
        trump_suit_at_play=deserialize_suit(payload["trump_suit_at_play"]),
        j_trump_active_at_play=payload["j_trump_active_at_play"],
        was_whoopie=payload.get("was_whoopie", False),
        was_scramble=payload.get("was_scramble", False),
    )


def completed_trick_to_dict(trick: CompletedTrick) -> Dict[str, Any]:
    return {
        "cards": [played_card_to_dict(played) for played in trick.cards],
        "winner_id": trick.winner_id,
        "winner_index": trick.winner_index,
        "lead_suit": serialize_suit(trick.lead_suit),
    }


def completed_trick_from_dict(payload: Mapping[str, Any]) -> CompletedTrick:
    return CompletedTrick(
        cards=tuple(played_card_from_dict(played) for played in payload["cards"]),
        winner_id=payload["winner_id"],
        winner_index=payload["winner_index"],
        lead_suit=deserialize_suit(payload["lead_suit"]),
    )


# Stanzas -----------------------------------------------------------------


def _stanza_common(stanza: StanzaState | StanzaView) -> Dict[str, Any]:
    return {
        "stanza_number": stanza.stanza_number,
        "cards_per_player": stanza.cards_per_player,
        "direction": stanza.direction,
        "dealer_index": stanza.dealer_index,
        "whoopie_defining_card": serialize_card(stanza.whoopie_defining_card),
        "whoopie_rank": serialize_rank(stanza.whoopie_rank),
        "initial_trump_suit": serialize_suit(stanza.initial_trump_suit),
        "current_trump_suit": serialize_suit(stanza.current_trump_suit),
        "j_trump_active": stanza.j_trump_active,
        "bids": list(stanza.bids),
        "current_trick_number": stanza.current_trick_number,
        "current_trick": [played_card_to_dict(played) for played in stanza.current_trick],
        "completed_tricks": [completed_trick_to_dict(trick) for trick in stanza.completed_tricks],
        "tricks_taken": list(stanza.tricks_taken),
        "current_player_index": stanza.current_player_index,
    }


def stanza_to_dict(stanza: StanzaState) -> Dict[str, Any]:
    payload = _stanza_common(stanza)
    payload["hands"] = [[serialize_card(card) for card in hand] for hand in stanza.hands]
    payload["undealt"] = [serialize_card(card) for card in stanza.undealt]
    return payload


def stanza_from_dict(payload: Mapping[str, Any]) -> StanzaState:
    return StanzaState(
        stanza_number=payload["stanza_number"],
        cards_per_player=payload["cards_per_player"],
        direction=payload["direction"],
        dealer_index=payload["dealer_index"],
        whoopie_defining_card=deserialize_card(payload["whoopie_defining_card"]),
        whoopie_rank=deserialize_rank(payload["whoopie_rank"]),
        initial_trump_suit=deserialize_suit(payload["initial_trump_suit"]),
        current_trump_suit=deserialize_suit(payload["current_trump_suit"]),
        j_trump_active=payload["j_trump_active"],
        bids=tuple(payload["bids"]),
        hands=tuple(tuple(deserialize_card(card) for card in hand) for hand in payload["hands"]),
        current_player_index=payload["current_player_index"],
        tricks_taken=tuple(payload["tricks_taken"]),
        current_trick_number=payload["current_trick_number"],
        current_trick=tuple(played_card_from_dict(played) for played in payload["current_trick"]),
        completed_tricks=tuple(completed_trick_from_dict(trick) for trick in payload["completed_tricks"]),
        undealt=tuple(deserialize_card(card) for card in payload.get("undealt", [])),
    )


def stanza_view_to_dict(view: StanzaView) -> Dict[str, Any]:
    payload = _stanza_common(view)
    payload["my_hand"] = [serialize_card(card) for card in view.my_hand]
    payload["other_hand_counts"] = list(view.other_hand_counts)
    return payload


def record_to_dict(record: CompletedStanzaRecord) -> Dict[str, Any]:
    return {
        "stanza_number": record.stanza_number,
        "cards_per_player": record.cards_per_player,
        "dealer_index": record.dealer_index,
        "whoopie_defining_card": serialize_card(record.whoopie_defining_card),
        "bids": list(record.bids),
        "tricks_taken": list(record.tricks_taken),
        "score_changes": list(record.score_changes),
        "player_ids": list(record.player_ids),
    }


def record_from_dict(payload: Mapping[str, Any]) -> CompletedStanzaRecord:
    return CompletedStanzaRecord(
        stanza_number=payload["stanza_number"],
        cards_per_player=payload["cards_per_player"],
        dealer_index=payload["dealer_index"],
        whoopie_defining_card=deserialize_card(payload["whoopie_defining_card"]),
        bids=tuple(payload["bids"]),
        tricks_taken=tuple(payload["tricks_taken"]),
        score_changes=tuple(payload["score_changes"]),
        player_ids=tuple(payload["player_ids"]),
    )


# Games -------------------------------------------------------------------


def game_to_dict(game: GameState) -> Dict[str, Any]:
    return {
        "id": game.id,
        "host_id": game.host_id,
        "created_at": game.created_at,
        "settings": settings_to_dict(game.settings),
        "phase": str(game.phase),
        "players": [player_to_dict(player) for player in game.players],
        "scorekeeper_index": game.scorekeeper_index,
        "scores": list(game.scores),
        "stanza": stanza_to_dict(game.stanza) if game.stanza is not None else None,
        "completed_stanzas": [record_to_dict(record) for record in game.completed_stanzas],
        "truncated_average": game.truncated_average,
    }


def game_from_dict(payload: Mapping[str, Any]) -> GameState:
    stanza_payload = payload.get("stanza")
    return GameState(
        id=payload["id"],
        host_id=payload["host_id"],
        created_at=payload["created_at"],
        settings=settings_from_dict(payload.get("settings")),
        phase=GamePhase[str(payload["phase"]).upper()],
        players=tuple(player_from_dict(player) for player in payload["players"]),
        scorekeeper_index=payload.get("scorekeeper_index"),
        scores=tuple(payload["scores"]),
        stanza=stanza_from_dict(stanza_payload) if stanza_payload is not None else None,
        completed_stanzas=tuple(record_from_dict(record) for record in payload.get("completed_stanzas", [])),
        truncated_average=payload.get("truncated_average", 0),
    )


def player_view_to_dict(view: PlayerView) -> Dict[str, Any]:
    return {
        "game_id": view.game_id,
        "host_id": view.host_id,
        "phase": str(view.phase),
        "settings": settings_to_dict(view.settings),
        "players": [player_to_dict(player) for player in view.players],
        "scores": list(view.scores),
        "scorekeeper_index": view.scorekeeper_index,
        "completed_stanzas": [record_to_dict(record) for record in view.completed_stanzas],
        "truncated_average": view.truncated_average,
        "my_index": view.my_index,
        "stanza": stanza_view_to_dict(view.stanza) if view.stanza is not None else None,
        "valid_bids": list(view.valid_bids),
        "valid_cards": [serialize_card(card) for card in view.valid_cards],
    }


# Events ------------------------------------------------------------------


def event_to_dict(event: GameEvent, perspective: Optional[int] = None) -> Dict[str, Any]:
    """Encode an event; with a ``perspective`` seat, dealt hands are redacted."""
    payload: Dict[str, Any] = {"type": event.type}
    if isinstance(event, PlayerJoined):
        payload["player"] = player_to_dict(event.player)
    elif isinstance(event, PlayerLeft):
        payload["player_id"] = event.player_id
        payload["player_name"] = event.player_name
        payload["replacement"] = player_to_dict(event.replacement) if event.replacement is not None else None
    elif isinstance(event, GameStarted):
        pass
    elif isinstance(event, CutForDealer):
        payload["cut_cards"] = [serialize_card(card) for card in event.cut_cards]
        payload["dealer_index"] = event.dealer_index
    elif isinstance(event, StanzaStarted):
        if perspective is None:
            payload["stanza"] = stanza_to_dict(event.stanza)
        else:
            payload["stanza"] = stanza_view_to_dict(redact_stanza(event.stanza, perspective))
    elif isinstance(event, BidPlaced):
        payload["player_index"] = event.player_index
        payload["bid"] = event.bid
    elif isinstance(event, CardPlayed):
        payload["player_index"] = event.player_index
        payload["card"] = serialize_card(event.card)
        payload["was_whoopie"] = event.was_whoopie
        payload["was_scramble"] = event.was_scramble
        payload["new_trump_suit"] = serialize_suit(event.new_trump_suit)
    elif isinstance(event, TrickCompleted):
        payload["trick"] = completed_trick_to_dict(event.trick)
    elif isinstance(event, StanzaCompleted):
        payload["score_changes"] = list(event.score_changes)
        payload["new_scores"] = list(event.new_scores)
    elif isinstance(event, GameEnded):
        payload["final_scores"] = list(event.final_scores)
        payload["rankings"] = list(event.rankings)
    elif isinstance(event, WhoopieCallMissed):
        payload["player_index"] = event.player_index
    elif isinstance(event, StanzaRedealt):
        payload["reason"] = event.reason
    else:
        raise TypeError(f"Unknown event: {event!r}")
    return payload


def events_to_dicts(events: List[GameEvent], perspective: Optional[int] = None) -> List[Dict[str, Any]]:
    return [event_to_dict(event, perspective) for event in events]
