"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Tuple

from whoopie.cards import Card
from whoopie.game import get_valid_actions, must_call_whoopie
from whoopie.state import GameState


class BotStrategy:
    """Base class for bot policies.

    Bots act only through the same commands as any client: they pick a bid
    or a card and report whether they called Whoopie.
    """

    name: str = "BaseBot"

    def on_stanza_start(self, game: GameState, player: int) -> None:
        """Optional hook invoked when a new stanza is dealt."""
        return None

    def choose_bid(self, game: GameState, player: int) -> int:
        """Return the bid to place."""
        legal = get_valid_actions(game).can_bid
        if not legal:
            raise RuntimeError("No legal bids available for bot.")
        return legal[0]

    def play_card(self, game: GameState, player: int) -> Tuple[Card, bool]:
        """Return (card, called_whoopie)."""
        legal = get_valid_actions(game).can_play
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        card = legal[0]
        return card, must_call_whoopie(game, card)
