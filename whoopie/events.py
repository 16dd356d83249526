"""Events emitted by state transitions, in the order they happened.

The host relays or persists them; the engine does not care how.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

from .cards import Card, Suit
from .state import Player, StanzaState
from .trick import CompletedTrick


@dataclass(frozen=True)
class PlayerJoined:
    type: ClassVar[str] = "playerJoined"
    player: Player


@dataclass(frozen=True)
class PlayerLeft:
    type: ClassVar[str] = "playerLeft"
    player_id: str
    player_name: Optional[str] = None
    replacement: Optional[Player] = None


@dataclass(frozen=True)
class GameStarted:
    type: ClassVar[str] = "gameStarted"


@dataclass(frozen=True)
class CutForDealer:
    type: ClassVar[str] = "cutForDealer"
    cut_cards: Tuple[Card, ...]
    dealer_index: int


@dataclass(frozen=True)
class StanzaStarted:
    type: ClassVar[str] = "stanzaStarted"
    stanza: StanzaState


@dataclass(frozen=True)
class BidPlaced:
    type: ClassVar[str] = "bidPlaced"
    player_index: int
    bid: int


@dataclass(frozen=True)
class CardPlayed:
    type: ClassVar[str] = "cardPlayed"
    player_index: int
    card: Card
    was_whoopie: bool
    was_scramble: bool
    new_trump_suit: Optional[Suit]


@dataclass(frozen=True)
class TrickCompleted:
    type: ClassVar[str] = "trickCompleted"
    trick: CompletedTrick


@dataclass(frozen=True)
class StanzaCompleted:
    type: ClassVar[str] = "stanzaCompleted"
    score_changes: Tuple[int, ...]
    new_scores: Tuple[int, ...]


@dataclass(frozen=True)
class GameEnded:
    type: ClassVar[str] = "gameEnded"
    final_scores: Tuple[int, ...]
    rankings: Tuple[int, ...]


@dataclass(frozen=True)
class WhoopieCallMissed:
    type: ClassVar[str] = "whoopieCallMissed"
    player_index: int


@dataclass(frozen=True)
class StanzaRedealt:
    type: ClassVar[str] = "stanzaRedealt"
    reason: str


GameEvent = Union[
    PlayerJoined,
    PlayerLeft,
    GameStarted,
    CutForDealer,
    StanzaStarted,
    BidPlaced,
    CardPlayed,
    TrickCompleted,
    StanzaCompleted,
    GameEnded,
    WhoopieCallMissed,
    StanzaRedealt,
]
