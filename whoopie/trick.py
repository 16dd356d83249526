"""Played-card records and trick resolution.

A card's trump status is locked at the moment it is played. Each
``PlayedCard`` carries the trump suit and J-Trump flag that were live at that
instant, and resolution reads those snapshots rather than the stanza's
current trump state, which may have moved on later in the same trick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .cards import Card, JokerCard, Rank, Suit, SuitCard, card_to_string, is_whoopie_card, RANK_VALUES
from .errors import TrickError

logger = logging.getLogger(__name__)

# Rank value of a joker led before any Whoopie rank exists; beats an ace.
UNDEFINED_JOKER_RANK_VALUE = 16


@dataclass(frozen=True)
class PlayedCard:
    card: Card
    player_id: str
    player_index: int
    trump_suit_at_play: Optional[Suit]
    j_trump_active_at_play: bool
    was_whoopie: bool = False
    was_scramble: bool = False


@dataclass(frozen=True)
class CompletedTrick:
    cards: Tuple[PlayedCard, ...]
    winner_id: str
    winner_index: int
    lead_suit: Optional[Suit]


def get_lead_suit(trick: Sequence[PlayedCard]) -> Optional[Suit]:
    """Return the led suit, or None for an empty trick or a joker lead."""
    if not trick:
        return None
    lead = trick[0].card
    if isinstance(lead, JokerCard):
        return None
    return lead.suit


def was_trump_at_play(
    played: PlayedCard,
    whoopie_rank: Optional[Rank],
    lead_suit: Optional[Suit],
) -> bool:
    card = played.card
    if isinstance(card, JokerCard):
        return True
    if is_whoopie_card(card, whoopie_rank):
        return True
    if played.j_trump_active_at_play:
        # Joker led: every card is trump. Joker mid-trick: the led suit is.
        if lead_suit is None:
            return True
        return card.suit is lead_suit
    return card.suit is played.trump_suit_at_play


def effective_rank_value(card: Card, whoopie_rank: Optional[Rank]) -> int:
    """Jokers take the Whoopie denomination, or outrank everything before one exists."""
    if isinstance(card, JokerCard):
        if whoopie_rank is None:
            return UNDEFINED_JOKER_RANK_VALUE
        return RANK_VALUES[whoopie_rank]
    return RANK_VALUES[card.rank]


def card_beats_card(
    challenger: PlayedCard,
    incumbent: PlayedCard,
    whoopie_rank: Optional[Rank],
    lead_suit: Optional[Suit],
) -> bool:
    """Return True if ``challenger`` (played later) takes the trick from ``incumbent``.

    Equal ranks never displace the incumbent: the earlier card wins ties.
    """
    challenger_trump = was_trump_at_play(challenger, whoopie_rank, lead_suit)
    incumbent_trump = was_trump_at_play(incumbent, whoopie_rank, lead_suit)

    if challenger_trump and not incumbent_trump:
        return True
    if incumbent_trump and not challenger_trump:
        return False

    challenger_value = effective_rank_value(challenger.card, whoopie_rank)
    incumbent_value = effective_rank_value(incumbent.card, whoopie_rank)

    if challenger_trump:
        return challenger_value > incumbent_value

    challenger_follows = isinstance(challenger.card, SuitCard) and challenger.card.suit is lead_suit
    if not challenger_follows:
        return False
    incumbent_follows = isinstance(incumbent.card, SuitCard) and incumbent.card.suit is lead_suit
    if not incumbent_follows:
        return True
    return challenger_value > incumbent_value


def resolve_trick_winner(trick: Sequence[PlayedCard], whoopie_rank: Optional[Rank]) -> int:
    """Return the position within ``trick`` of the winning card."""
    if not trick:
        raise TrickError("Cannot resolve an empty trick.")

    lead_suit = get_lead_suit(trick)
    winner = 0
    for position in range(1, len(trick)):
        if card_beats_card(trick[position], trick[winner], whoopie_rank, lead_suit):
            winner = position

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Trick %s (lead=%s, whoopie=%s) won by position %s",
            [card_to_string(played.card) for played in trick],
            lead_suit,
            whoopie_rank,
            winner,
        )
    return winner


def create_completed_trick(trick: Sequence[PlayedCard], whoopie_rank: Optional[Rank]) -> CompletedTrick:
    winner = trick[resolve_trick_winner(trick, whoopie_rank)]
    return CompletedTrick(
        cards=tuple(trick),
        winner_id=winner.player_id,
        winner_index=winner.player_index,
        lead_suit=get_lead_suit(trick),
    )
