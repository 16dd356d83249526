"""Legal card play, stanza sizing and seat rotation for Whoopie."""

from __future__ import annotations

import logging
from typing import Iterable, List, Literal, Sequence, Tuple

from .cards import Card, cards_equal, get_cards_of_suit
from .deck import DECK_SIZE
from .errors import DeckExhausted, InsufficientPlayers
from .trick import PlayedCard, get_lead_suit

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2
MAX_PLAYERS = 10

Direction = Literal["up", "down"]


def get_valid_cards(hand: Iterable[Card], current_trick: Sequence[PlayedCard]) -> List[Card]:
    """Return the subset of the hand that may legally be played.

    The leader may play anything. A joker lead waives following suit for the
    whole trick. Otherwise a player holding the led suit must play it.
    """
    cards = list(hand)
    if not current_trick:
        return cards

    lead_suit = get_lead_suit(current_trick)
    if lead_suit is None:
        return cards

    following = get_cards_of_suit(cards, lead_suit)
    if following:
        return list(following)
    return cards


def is_valid_play(card: Card, hand: Sequence[Card], current_trick: Sequence[PlayedCard]) -> bool:
    if not any(cards_equal(held, card) for held in hand):
        return False
    return any(cards_equal(valid, card) for valid in get_valid_cards(hand, current_trick))


def get_max_cards_per_player(num_players: int) -> int:
    """One card must be left over to turn up as the defining card."""
    return (DECK_SIZE - 1) // num_players


def get_total_stanzas_in_cycle(num_players: int) -> int:
    """Stanzas in one full 1 -> max -> 1 cycle."""
    return get_max_cards_per_player(num_players) * 2 - 1


def get_next_cards_per_player(
    current_cards: int,
    direction: Direction,
    max_cards: int,
) -> Tuple[int, Direction]:
    """Step the triangular wave 1, 2, ... max, max-1, ... 1, 2, ..."""
    if direction == "up":
        if current_cards >= max_cards:
            return max_cards - 1, "down"
        return current_cards + 1, "up"
    if current_cards <= 1:
        return 2, "up"
    return current_cards - 1, "down"


def get_next_player_index(current_index: int, num_players: int) -> int:
    return (current_index + 1) % num_players


def get_first_leader_index(dealer_index: int, num_players: int) -> int:
    return get_next_player_index(dealer_index, num_players)


def get_first_bidder_index(dealer_index: int, num_players: int) -> int:
    return get_next_player_index(dealer_index, num_players)


def can_start_stanza(num_players: int, cards_per_player: int) -> None:
    """Raise if a stanza of this size cannot be dealt to this table."""
    if num_players < MIN_PLAYERS:
        raise InsufficientPlayers(f"Need at least {MIN_PLAYERS} players.")
    if num_players > MAX_PLAYERS:
        raise InsufficientPlayers(f"Maximum {MAX_PLAYERS} players.")
    if cards_per_player < 1:
        raise DeckExhausted("A stanza deals at least one card per player.")
    if num_players * cards_per_player + 1 > DECK_SIZE:
        raise DeckExhausted(f"Not enough cards for {cards_per_player} per player.")
