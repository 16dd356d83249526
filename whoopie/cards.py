"""Card-related data structures and helpers for Whoopie."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Mapping, Optional, Union


class Suit(Enum):
    SPADES = auto()
    HEARTS = auto()
    DIAMONDS = auto()
    CLUBS = auto()

    def __str__(self) -> str:
        return self.name.lower()


class Rank(Enum):
    ACE = auto()
    KING = auto()
    QUEEN = auto()
    JACK = auto()
    TEN = auto()
    NINE = auto()
    EIGHT = auto()
    SEVEN = auto()
    SIX = auto()
    FIVE = auto()
    FOUR = auto()
    THREE = auto()
    TWO = auto()

    def __str__(self) -> str:
        return RANK_SYMBOLS[self]


# Numeric values for comparison (A=14 ... 2=2).
RANK_VALUES: dict[Rank, int] = {
    Rank.ACE: 14,
    Rank.KING: 13,
    Rank.QUEEN: 12,
    Rank.JACK: 11,
    Rank.TEN: 10,
    Rank.NINE: 9,
    Rank.EIGHT: 8,
    Rank.SEVEN: 7,
    Rank.SIX: 6,
    Rank.FIVE: 5,
    Rank.FOUR: 4,
    Rank.THREE: 3,
    Rank.TWO: 2,
}

RANK_SYMBOLS: dict[Rank, str] = {
    Rank.ACE: "A",
    Rank.KING: "K",
    Rank.QUEEN: "Q",
    Rank.JACK: "J",
    Rank.TEN: "10",
    Rank.NINE: "9",
    Rank.EIGHT: "8",
    Rank.SEVEN: "7",
    Rank.SIX: "6",
    Rank.FIVE: "5",
    Rank.FOUR: "4",
    Rank.THREE: "3",
    Rank.TWO: "2",
}
SYMBOL_RANKS: dict[str, Rank] = {symbol: rank for rank, symbol in RANK_SYMBOLS.items()}

SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}
SYMBOL_SUITS: dict[str, Suit] = {symbol: suit for suit, symbol in SUIT_SYMBOLS.items()}

JOKER_NUMBERS = (1, 2)

# Value of a joker in a cut; it sits above the ace so it can never deal.
JOKER_CUT_VALUE = 15


@dataclass(frozen=True)
class SuitCard:
    suit: Suit
    rank: Rank

    def __str__(self) -> str:
        return card_to_string(self)


@dataclass(frozen=True)
class JokerCard:
    joker_number: int

    def __post_init__(self) -> None:
        if self.joker_number not in JOKER_NUMBERS:
            raise ValueError(f"Joker number must be 1 or 2, got {self.joker_number!r}.")

    def __str__(self) -> str:
        return card_to_string(self)


Card = Union[SuitCard, JokerCard]


def is_joker(card: Card) -> bool:
    return isinstance(card, JokerCard)


def cards_equal(a: Card, b: Card) -> bool:
    """Return True if both values denote the same physical card."""
    return type(a) is type(b) and a == b


def rank_value(rank: Rank) -> int:
    return RANK_VALUES[rank]


def cut_value(card: Card) -> int:
    """Return the value of a card in the cut for dealer (lowest deals)."""
    if isinstance(card, JokerCard):
        return JOKER_CUT_VALUE
    return RANK_VALUES[card.rank]


def compare_cards_for_cut(a: Card, b: Card) -> int:
    """Order two cut cards; jokers rank above everything, joker 1 below joker 2."""
    if isinstance(a, JokerCard) and isinstance(b, JokerCard):
        return a.joker_number - b.joker_number
    return cut_value(a) - cut_value(b)


# Whoopie and trump detection --------------------------------------------


def is_whoopie_card(card: Card, whoopie_rank: Optional[Rank]) -> bool:
    """Return True if the card carries the Whoopie denomination.

    Jokers share the Whoopie denomination once a rank has been defined.
    """
    if whoopie_rank is None:
        return False
    if isinstance(card, JokerCard):
        return True
    return card.rank is whoopie_rank


def is_trump(
    card: Card,
    trump_suit: Optional[Suit],
    whoopie_rank: Optional[Rank],
    j_trump_active: bool,
) -> bool:
    """Return True if the card is trump under the given live trump state.

    Under J-Trump only Whoopie cards (and jokers) are trump.
    """
    if isinstance(card, JokerCard):
        return True
    if j_trump_active:
        return card.rank is whoopie_rank
    return card.suit is trump_suit or card.rank is whoopie_rank


def get_cards_of_suit(hand: Iterable[Card], suit: Suit) -> List[SuitCard]:
    return [card for card in hand if isinstance(card, SuitCard) and card.suit is suit]


def get_whoopie_cards_in_hand(hand: Iterable[Card], whoopie_rank: Optional[Rank]) -> List[Card]:
    return [card for card in hand if is_whoopie_card(card, whoopie_rank)]


def get_trump_cards_in_hand(
    hand: Iterable[Card],
    trump_suit: Optional[Suit],
    whoopie_rank: Optional[Rank],
    j_trump_active: bool,
) -> List[Card]:
    return [card for card in hand if is_trump(card, trump_suit, whoopie_rank, j_trump_active)]


# Sorting -----------------------------------------------------------------

SUIT_ORDER: dict[Suit, int] = {suit: index for index, suit in enumerate(Suit)}


def _display_key(card: Card) -> tuple[int, int, int]:
    if isinstance(card, JokerCard):
        return (len(SUIT_ORDER), 0, card.joker_number)
    return (SUIT_ORDER[card.suit], -RANK_VALUES[card.rank], 0)


def sort_hand(hand: Iterable[Card]) -> List[Card]:
    """Sort by suit (spades, hearts, diamonds, clubs), high to low, jokers last."""
    return sorted(hand, key=_display_key)


def sort_hand_with_trump(hand: Iterable[Card], trump_suit: Optional[Suit]) -> List[Card]:
    """Sort with the trump suit first, then jokers, then the remaining suits."""
    if trump_suit is None:
        return sort_hand(hand)

    def key(card: Card) -> tuple[int, tuple[int, int, int]]:
        if isinstance(card, JokerCard):
            return (1, _display_key(card))
        if card.suit is trump_suit:
            return (0, _display_key(card))
        return (2, _display_key(card))

    return sorted(hand, key=key)


# Display and boundary (de)serialization -----------------------------------


def card_to_string(card: Card) -> str:
    if isinstance(card, JokerCard):
        return f"Joker{card.joker_number}"
    return f"{RANK_SYMBOLS[card.rank]}{SUIT_SYMBOLS[card.suit]}"


def parse_card_string(text: str) -> Optional[Card]:
    """Parse the output of ``card_to_string``; return None if it is not a card."""
    if text.startswith("Joker"):
        number = text[5:]
        if number in ("1", "2"):
            return JokerCard(int(number))
        return None
    if len(text) < 2:
        return None
    suit = SYMBOL_SUITS.get(text[-1])
    rank = SYMBOL_RANKS.get(text[:-1])
    if suit is None or rank is None:
        return None
    return SuitCard(suit, rank)


def card_label(card: Card) -> str:
    if isinstance(card, JokerCard):
        return f"Joker {card.joker_number}"
    return f"{card.rank.name.title()} of {card.suit.name.title()}"


def serialize_card(card: Card) -> dict[str, object]:
    if isinstance(card, JokerCard):
        return {"type": "joker", "joker_number": card.joker_number}
    return {"type": "suit", "suit": card.suit.name.lower(), "rank": RANK_SYMBOLS[card.rank]}


def deserialize_card(payload: Mapping[str, object]) -> Card:
    kind = payload.get("type")
    if kind == "joker":
        number = payload.get("joker_number")
        if not isinstance(number, int):
            raise ValueError("Joker payload needs an integer 'joker_number'.")
        return JokerCard(number)
    if kind == "suit":
        suit_name = str(payload.get("suit", "")).upper()
        rank_symbol = str(payload.get("rank", "")).upper()
        if suit_name not in Suit.__members__:
            raise ValueError(f"Unknown suit: {payload.get('suit')!r}")
        if rank_symbol not in SYMBOL_RANKS:
            raise ValueError(f"Unknown rank: {payload.get('rank')!r}")
        return SuitCard(Suit[suit_name], SYMBOL_RANKS[rank_symbol])
    raise ValueError(f"Unknown card type: {kind!r}")


def serialize_suit(suit: Optional[Suit]) -> Optional[str]:
    return suit.name.lower() if suit is not None else None


def deserialize_suit(value: Optional[str]) -> Optional[Suit]:
    if value is None:
        return None
    return Suit[value.upper()]


def serialize_rank(rank: Optional[Rank]) -> Optional[str]:
    return RANK_SYMBOLS[rank] if rank is not None else None


def deserialize_rank(value: Optional[str]) -> Optional[Rank]:
    if value is None:
        return None
    return SYMBOL_RANKS[value.upper()]
