"""Immutable game and stanza records for Whoopie.

Seats are positions in ``GameState.players``; every per-seat tuple (scores,
bids, hands, tricks taken) is indexed the same way. Records are frozen and
transitions build replacements with ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple, Union

from .cards import Card, Rank, Suit
from .mechanics import Direction
from .settings import GameSettings
from .trick import CompletedTrick, PlayedCard
from .trump import TrumpState


class GamePhase(Enum):
    WAITING = auto()
    BIDDING = auto()
    PLAYING = auto()
    TRICK_END = auto()
    STANZA_END = auto()
    GAME_END = auto()

    def __str__(self) -> str:
        return self.name.lower()


class AIDifficulty(Enum):
    BEGINNER = auto()
    INTERMEDIATE = auto()
    EXPERT = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class HumanPlayer:
    id: str
    name: str
    is_connected: bool = True


@dataclass(frozen=True)
class AIPlayer:
    id: str
    name: str
    difficulty: AIDifficulty = AIDifficulty.BEGINNER


Player = Union[HumanPlayer, AIPlayer]


def is_ai(player: Player) -> bool:
    return isinstance(player, AIPlayer)


@dataclass(frozen=True)
class StanzaState:
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
    hands: Tuple[Tuple[Card, ...], ...]
    current_player_index: int
    tricks_taken: Tuple[int, ...]
    current_trick_number: int = 1
    current_trick: Tuple[PlayedCard, ...] = ()
    completed_tricks: Tuple[CompletedTrick, ...] = ()
    # Cards left in the deck under the defining card; never shown to players.
    undealt: Tuple[Card, ...] = ()

    @property
    def trump_state(self) -> TrumpState:
        return TrumpState(
            trump_suit=self.current_trump_suit,
            whoopie_rank=self.whoopie_rank,
            j_trump_active=self.j_trump_active,
        )

    @property
    def num_seats(self) -> int:
        return len(self.hands)

    def is_complete(self) -> bool:
        return len(self.completed_tricks) >= self.cards_per_player


@dataclass(frozen=True)
class CompletedStanzaRecord:
    stanza_number: int
    cards_per_player: int
    dealer_index: int
    whoopie_defining_card: Card
    bids: Tuple[int, ...]
    tricks_taken: Tuple[int, ...]
    score_changes: Tuple[int, ...]
    player_ids: Tuple[str, ...]


@dataclass(frozen=True)
class GameState:
    id: str
    host_id: str
    created_at: float
    settings: GameSettings = field(default_factory=GameSettings)
    phase: GamePhase = GamePhase.WAITING
    players: Tuple[Player, ...] = ()
    scorekeeper_index: Optional[int] = None
    scores: Tuple[int, ...] = ()
    stanza: Optional[StanzaState] = None
    completed_stanzas: Tuple[CompletedStanzaRecord, ...] = ()
    truncated_average: int = 0

    def seat_of(self, player_id: str) -> Optional[int]:
        for seat, player in enumerate(self.players):
            if player.id == player_id:
                return seat
        return None

    @property
    def in_progress(self) -> bool:
        return self.phase not in (GamePhase.WAITING, GamePhase.GAME_END)
