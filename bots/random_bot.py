"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Tuple

from whoopie.cards import Card
from whoopie.game import get_valid_actions, must_call_whoopie
from whoopie.state import GameState

from .base import BotStrategy


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None, *, forget_call_rate: float = 0.0) -> None:
        self._rng = random.Random(seed)
        self.forget_call_rate = forget_call_rate

    def choose_bid(self, game: GameState, player: int) -> int:
        legal = list(get_valid_actions(game).can_bid)
        if not legal:
            raise RuntimeError("No legal bids available for bot.")
        return self._rng.choice(legal)

    def play_card(self, game: GameState, player: int) -> Tuple[Card, bool]:
        legal = list(get_valid_actions(game).can_play)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        card = self._rng.choice(legal)
        called = must_call_whoopie(game, card)
        if called and self._rng.random() < self.forget_call_rate:
            called = False
        return card, called
