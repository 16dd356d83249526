"""Trump state transitions.

Trump in Whoopie is not fixed for a stanza. It starts from the turned-up
defining card, moves to the suit of every Whoopie card played, and is
cancelled into J-Trump by jokers. When the defining card is itself a joker
the stanza starts with its Whoopie rank *pending*: the first non-joker lead
defines both rank and trump. A joker led while the rank is pending wins its
trick outright and leaves the definition pending for its player's next lead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .cards import Card, JokerCard, Rank, Suit, is_whoopie_card

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrumpState:
    trump_suit: Optional[Suit]
    whoopie_rank: Optional[Rank]
    j_trump_active: bool

    @property
    def pending_definition(self) -> bool:
        return self.whoopie_rank is None


@dataclass(frozen=True)
class TrumpChange:
    new_trump_suit: Optional[Suit]
    new_j_trump_active: bool
    was_whoopie: bool
    was_scramble: bool


@dataclass(frozen=True)
class TrumpDefined:
    trump_suit: Suit
    whoopie_rank: Rank


@dataclass(frozen=True)
class DefinitionDeferred:
    """A joker was led while the Whoopie rank was pending; it auto-wins."""


LeadDefinition = Union[TrumpDefined, DefinitionDeferred]


def initial_trump_from_defining_card(defining_card: Card) -> TrumpState:
    if isinstance(defining_card, JokerCard):
        return TrumpState(trump_suit=None, whoopie_rank=None, j_trump_active=True)
    return TrumpState(
        trump_suit=defining_card.suit,
        whoopie_rank=defining_card.rank,
        j_trump_active=False,
    )


def define_from_lead(lead: Card) -> LeadDefinition:
    if isinstance(lead, JokerCard):
        return DefinitionDeferred()
    return TrumpDefined(trump_suit=lead.suit, whoopie_rank=lead.rank)


def apply_lead_definition(state: TrumpState, lead: Card) -> TrumpState:
    """Resolve a pending Whoopie rank against a lead card.

    States that are already defined pass through untouched.
    """
    if not state.pending_definition:
        return state
    definition = define_from_lead(lead)
    if isinstance(definition, TrumpDefined):
        logger.debug("Lead defines trump %s, Whoopie rank %s", definition.trump_suit, definition.whoopie_rank)
        return TrumpState(
            trump_suit=definition.trump_suit,
            whoopie_rank=definition.whoopie_rank,
            j_trump_active=False,
        )
    logger.debug("Joker led with Whoopie rank pending; definition deferred")
    return TrumpState(trump_suit=state.trump_suit, whoopie_rank=None, j_trump_active=True)


def get_trump_state_after_play(
    card: Card,
    current_trump_suit: Optional[Suit],
    whoopie_rank: Optional[Rank],
    j_trump_active: bool,
    lead_suit: Optional[Suit],
    is_lead: bool,
) -> TrumpChange:
    if isinstance(card, JokerCard):
        if is_lead:
            # Every suit is trump for this trick.
            return TrumpChange(None, True, was_whoopie=False, was_scramble=True)
        # The suit already led becomes trump for the rest of the trick.
        return TrumpChange(lead_suit, True, was_whoopie=False, was_scramble=True)

    if is_whoopie_card(card, whoopie_rank):
        return TrumpChange(card.suit, False, was_whoopie=True, was_scramble=False)

    return TrumpChange(current_trump_suit, j_trump_active, was_whoopie=False, was_scramble=False)


def play_transition(
    state: TrumpState,
    card: Card,
    lead_suit: Optional[Suit],
    is_lead: bool,
) -> tuple[TrumpState, TrumpChange]:
    """Return the trump state in force as ``card`` lands and the change it causes.

    The first element is what gets frozen onto the played card.
    """
    at_play = apply_lead_definition(state, card) if is_lead else state
    change = get_trump_state_after_play(
        card,
        at_play.trump_suit,
        at_play.whoopie_rank,
        at_play.j_trump_active,
        lead_suit,
        is_lead,
    )
    return at_play, change


def requires_whoopie_call(card: Card, whoopie_rank: Optional[Rank]) -> bool:
    """A non-joker card of the Whoopie rank must be announced when played."""
    return not isinstance(card, JokerCard) and is_whoopie_card(card, whoopie_rank)
