"""Rule violations raised by the Whoopie engine.

Every command either returns a new state or raises one of these before any
state has been rebuilt, so a rejected command never leaves partial changes.
"""

from __future__ import annotations


class WhoopieError(RuntimeError):
    """Base class for engine rejections."""

    code = "WHOOPIE_ERROR"


class InvalidPhase(WhoopieError):
    """Raised when a command is not allowed in the current game phase."""

    code = "INVALID_PHASE"


class NotYourTurn(WhoopieError):
    """Raised when a seat acts out of turn."""

    code = "NOT_YOUR_TURN"


class InvalidBid(WhoopieError):
    """Raised when a bid is out of range or breaks the dealer hook."""

    code = "INVALID_BID"


class InvalidPlay(WhoopieError):
    """Raised when a card is not held or does not follow suit."""

    code = "INVALID_PLAY"


class InsufficientPlayers(WhoopieError):
    """Raised when the seat count is outside what the game supports."""

    code = "INSUFFICIENT_PLAYERS"


class DeckExhausted(WhoopieError):
    """Raised when a deal would leave no card to turn up as the defining card."""

    code = "DECK_EXHAUSTED"


class PlayerNotFound(WhoopieError):
    """Raised when a command references an unknown seat or player id."""

    code = "PLAYER_NOT_FOUND"


class GameFull(WhoopieError):
    code = "GAME_FULL"


class DuplicatePlayer(WhoopieError):
    code = "DUPLICATE_PLAYER"


class GameNotFound(WhoopieError):
    """Raised by the service layer for an unknown game id."""

    code = "GAME_NOT_FOUND"


class TrickError(WhoopieError):
    """Raised when a trick cannot be resolved."""

    code = "TRICK_ERROR"
