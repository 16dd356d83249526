"""Per-seat projections of the game.

A seat sees its own hand and only the size of everyone else's. The undealt
remainder of the deck is never shown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .cards import Card, Rank, Suit
from .errors import PlayerNotFound
from .game import get_valid_actions
from .mechanics import Direction
from .settings import GameSettings
from .state import CompletedStanzaRecord, GamePhase, GameState, Player, StanzaState
from .trick import CompletedTrick, PlayedCard


@dataclass(frozen=True)
class StanzaView:
    stanza_number: int
    cards_per_player: int
    direction: Direction
    dealer_index: int
    whoopie_defining_card: Card
    whoopie_rank: Optional[Rank]
    initial_trump_suit: Optional[Suit]
    current_trump_suit: Optional[Suit]
    j_trump_active: bool
    bids: Tuple[Optional[int], ...]
    current_trick_number: int
    current_trick: Tuple[PlayedCard, ...]
    completed_tricks: Tuple[CompletedTrick, ...]
    tricks_taken: Tuple[int, ...]
    current_player_index: int
    my_hand: Tuple[Card, ...]
    other_hand_counts: Tuple[int, ...]


@dataclass(frozen=True)
class PlayerView:
    game_id: str
    host_id: str
    phase: GamePhase
    settings: GameSettings
    players: Tuple[Player, ...]
    scores: Tuple[int, ...]
    scorekeeper_index: Optional[int]
    completed_stanzas: Tuple[CompletedStanzaRecord, ...]
    truncated_average: int
    my_index: int
    stanza: Optional[StanzaView]
    valid_bids: Tuple[int, ...] = ()
    valid_cards: Tuple[Card, ...] = ()


def redact_stanza(stanza: StanzaState, seat: int) -> StanzaView:
    if not 0 <= seat < stanza.num_seats:
        raise PlayerNotFound(f"No player at seat {seat}.")
    return StanzaView(
        stanza_number=stanza.stanza_number,
        cards_per_player=stanza.cards_per_player,
        direction=stanza.direction,
        dealer_index=stanza.dealer_index,
        whoopie_defining_card=stanza.whoopie_defining_card,
        whoopie_rank=stanza.whoopie_rank,
        initial_trump_suit=stanza.initial_trump_suit,
        current_trump_suit=stanza.current_trump_suit,
        j_trump_active=stanza.j_trump_active,
        bids=stanza.bids,
        current_trick_number=stanza.current_trick_number,
        current_trick=stanza.current_trick,
        completed_tricks=stanza.completed_tricks,
        tricks_taken=stanza.tricks_taken,
        current_player_index=stanza.current_player_index,
        my_hand=stanza.hands[seat],
        other_hand_counts=tuple(len(hand) for hand in stanza.hands),
    )


def get_player_view(game: GameState, seat: int) -> PlayerView:
    """Return what ``seat`` is allowed to see of ``game``."""
    if not 0 <= seat < len(game.players):
        raise PlayerNotFound(f"No player at seat {seat}.")

    stanza_view = redact_stanza(game.stanza, seat) if game.stanza is not None else None
    valid_bids: Tuple[int, ...] = ()
    valid_cards: Tuple[Card, ...] = ()
    if game.stanza is not None and game.stanza.current_player_index == seat:
        actions = get_valid_actions(game)
        valid_bids, valid_cards = actions.can_bid, actions.can_play

    return PlayerView(
        game_id=game.id,
        host_id=game.host_id,
        phase=game.phase,
        settings=game.settings,
        players=game.players,
        scores=game.scores,
        scorekeeper_index=game.scorekeeper_index,
        completed_stanzas=game.completed_stanzas,
        truncated_average=game.truncated_average,
        my_index=seat,
        stanza=stanza_view,
        valid_bids=valid_bids,
        valid_cards=valid_cards,
    )
