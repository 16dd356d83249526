"""Deck creation, shuffling and dealing for Whoopie."""

from __future__ import annotations

from random import Random
from typing import List, Optional, Sequence, Tuple

from .cards import Card, JokerCard, Rank, Suit, SuitCard, cut_value, JOKER_NUMBERS
from .errors import DeckExhausted

DECK_SIZE = 54


def create_deck() -> List[Card]:
    """Return the ordered 54-card deck (52 suit cards plus two jokers)."""
    deck: List[Card] = [SuitCard(suit, rank) for suit in Suit for rank in Rank]
    deck.extend(JokerCard(number) for number in JOKER_NUMBERS)
    return deck


def shuffle_deck(deck: Sequence[Card], *, rng: Optional[Random] = None) -> List[Card]:
    """Return a Fisher-Yates shuffled copy of the deck."""
    if rng is None:
        rng = Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def deal_cards(
    deck: Sequence[Card],
    num_players: int,
    cards_per_player: int,
    start_seat: int = 0,
) -> Tuple[List[List[Card]], List[Card]]:
    """Deal one card at a time round the table starting at ``start_seat``.

    One card must remain afterwards to turn up as the Whoopie defining card.
    """
    needed = num_players * cards_per_player + 1
    if needed > DECK_SIZE or needed > len(deck):
        raise DeckExhausted(
            f"Cannot deal {cards_per_player} cards to {num_players} players from {len(deck)} cards."
        )

    hands: List[List[Card]] = [[] for _ in range(num_players)]
    position = 0
    for _ in range(cards_per_player):
        for offset in range(num_players):
            seat = (start_seat + offset) % num_players
            hands[seat].append(deck[position])
            position += 1

    return hands, list(deck[position:])


def cut_for_dealer(num_players: int, *, rng: Optional[Random] = None) -> Tuple[List[Card], int]:
    """Cut one card per seat from a fresh deck; the lowest card deals.

    Jokers cut high so they never win. If every seat cuts a joker, each
    cuts again from the rest of the pack. Equal values go to the lower seat.
    """
    if num_players > DECK_SIZE - len(JOKER_NUMBERS):
        raise DeckExhausted("Not enough cards to cut for every seat.")
    pack = shuffle_deck(create_deck(), rng=rng)
    cut_cards = pack[:num_players]
    position = num_players
    while all(isinstance(cut, JokerCard) for cut in cut_cards):
        cut_cards = pack[position:position + num_players]
        position += num_players
    dealer_index = min(range(num_players), key=lambda seat: (cut_value(cut_cards[seat]), seat))
    return cut_cards, dealer_index
