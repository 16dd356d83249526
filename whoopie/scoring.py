"""Stanza scoring and final standings for Whoopie."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

SCORE_MAKE_BID_BASE = 2
SCORE_MISS_BID = -1
SCORE_MISSED_WHOOPIE_CALL = -1


class ScoringError(ValueError):
    """Raised when per-seat score inputs do not line up."""


@dataclass(frozen=True)
class Standing:
    player_id: str
    player_name: str
    score: int
    rank: int


@dataclass(frozen=True)
class ScoreStats:
    highest: int
    lowest: int
    average: float
    spread: int


def calculate_player_stanza_score(bid: int, tricks_taken: int) -> int:
    """Exact bid earns 2 + bid; anything else costs a point."""
    if tricks_taken == bid:
        return SCORE_MAKE_BID_BASE + bid
    return SCORE_MISS_BID


def calculate_stanza_scores(bids: Sequence[int], tricks_taken: Sequence[int]) -> List[int]:
    if len(bids) != len(tricks_taken):
        raise ScoringError("Bids and tricks taken must have the same length.")
    return [calculate_player_stanza_score(bid, taken) for bid, taken in zip(bids, tricks_taken)]


def apply_score_changes(current_scores: Sequence[int], score_changes: Sequence[int]) -> List[int]:
    if len(current_scores) != len(score_changes):
        raise ScoringError("Scores and changes must have the same length.")
    return [score + change for score, change in zip(current_scores, score_changes)]


def get_missed_whoopie_call_penalty() -> int:
    return SCORE_MISSED_WHOOPIE_CALL


def calculate_truncated_average(scores: Sequence[int]) -> int:
    """Baseline score for a player introduced mid-game: floor of the mean."""
    if not scores:
        return 0
    return sum(scores) // len(scores)


def calculate_rankings(scores: Sequence[int]) -> List[int]:
    """Return a 1-based rank per seat, highest score first.

    Tied scores share the rank of the first of them, and the counter still
    advances per position, so [10, 25, 15, 25] ranks as [4, 1, 3, 1].
    """
    order = sorted(range(len(scores)), key=lambda seat: -scores[seat])
    rankings = [0] * len(scores)
    for position, seat in enumerate(order):
        if position > 0 and scores[seat] == scores[order[position - 1]]:
            rankings[seat] = rankings[order[position - 1]]
        else:
            rankings[seat] = position + 1
    return rankings


def get_standings(
    player_ids: Sequence[str],
    player_names: Sequence[str],
    scores: Sequence[int],
) -> List[Standing]:
    rankings = calculate_rankings(scores)
    standings = [
        Standing(player_id=player_id, player_name=name, score=score, rank=rank)
        for player_id, name, score, rank in zip(player_ids, player_names, scores, rankings)
    ]
    return sorted(standings, key=lambda standing: standing.rank)


def get_point_award_positions(num_players: int) -> List[int]:
    """Places that earn points: 1st up to four players, top two up to seven, else top three."""
    if num_players <= 4:
        return [1]
    if num_players <= 7:
        return [1, 2]
    return [1, 2, 3]


def rank_gets_points(rank: int, num_players: int) -> bool:
    return rank in get_point_award_positions(num_players)


def get_score_stats(scores: Sequence[int]) -> ScoreStats:
    if not scores:
        return ScoreStats(highest=0, lowest=0, average=0.0, spread=0)
    highest = max(scores)
    lowest = min(scores)
    return ScoreStats(
        highest=highest,
        lowest=lowest,
        average=sum(scores) / len(scores),
        spread=highest - lowest,
    )


def calculate_bid_success_rate(made_count: int, total_stanzas: int) -> float:
    if total_stanzas == 0:
        return 0.0
    return made_count / total_stanzas
