"""Bidding rules, including the dealer hook."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


def get_valid_bids(
    player_index: int,
    dealer_index: int,
    cards_per_player: int,
    existing_bids: Sequence[Optional[int]],
) -> List[int]:
    """Return the legal bids for a seat.

    Non-dealers may bid anything from 0 to ``cards_per_player``. The dealer
    may not bid the value that would make the total equal the trick count,
    so at least one player misses every stanza.
    """
    all_bids = list(range(cards_per_player + 1))
    if player_index != dealer_index:
        return all_bids

    current_total = sum(bid for bid in existing_bids if bid is not None)
    forbidden = cards_per_player - current_total
    logger.debug("Dealer hook: total=%s forbidden=%s", current_total, forbidden)
    return [bid for bid in all_bids if bid != forbidden]


def is_valid_bid(
    bid: int,
    player_index: int,
    dealer_index: int,
    cards_per_player: int,
    existing_bids: Sequence[Optional[int]],
) -> bool:
    if bid < 0 or bid > cards_per_player:
        return False
    return bid in get_valid_bids(player_index, dealer_index, cards_per_player, existing_bids)


def all_bids_placed(bids: Sequence[Optional[int]]) -> bool:
    return all(bid is not None for bid in bids)
