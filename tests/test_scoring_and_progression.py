import pytest

from whoopie.errors import DeckExhausted, InsufficientPlayers
from whoopie.mechanics import (
    can_start_stanza,
    get_first_bidder_index,
    get_max_cards_per_player,
    get_next_cards_per_player,
    get_next_player_index,
    get_total_stanzas_in_cycle,
)
from whoopie.scoring import (
    ScoringError,
    apply_score_changes,
    calculate_bid_success_rate,
    calculate_player_stanza_score,
    calculate_rankings,
    calculate_stanza_scores,
    calculate_truncated_average,
    get_missed_whoopie_call_penalty,
    get_point_award_positions,
    get_score_stats,
    get_standings,
    rank_gets_points,
)


def test_stanza_score_values():
    assert calculate_player_stanza_score(3, 3) == 5
    assert calculate_player_stanza_score(2, 1) == -1
    assert calculate_player_stanza_score(0, 0) == 2
    assert calculate_player_stanza_score(0, 2) == -1


def test_stanza_scores_apply_per_seat():
    changes = calculate_stanza_scores([1, 0, 2], [1, 1, 1])
    assert changes == [3, -1, -1]
    assert apply_score_changes([4, 0, -2], changes) == [7, -1, -3]


def test_mismatched_lengths_are_rejected():
    with pytest.raises(ScoringError):
        calculate_stanza_scores([1, 0], [1])
    with pytest.raises(ScoringError):
        apply_score_changes([1], [1, 2])


def test_rankings_keep_gaps_after_ties():
    assert calculate_rankings([10, 25, 15, 25]) == [4, 1, 3, 1]
    assert calculate_rankings([5, 5, 1]) == [1, 1, 3]
    assert calculate_rankings([]) == []


def test_standings_sorted_by_rank():
    standings = get_standings(["a", "b", "c"], ["Ann", "Bo", "Cy"], [3, 9, 3])
    assert [standing.player_id for standing in standings] == ["b", "a", "c"]
    assert [standing.rank for standing in standings] == [1, 2, 2]


def test_truncated_average_floors():
    assert calculate_truncated_average([3, 4]) == 3
    assert calculate_truncated_average([-3, 0]) == -2
    assert calculate_truncated_average([]) == 0


def test_point_award_positions_scale_with_table():
    assert get_point_award_positions(4) == [1]
    assert get_point_award_positions(7) == [1, 2]
    assert get_point_award_positions(8) == [1, 2, 3]
    assert rank_gets_points(2, 6)
    assert not rank_gets_points(2, 3)


def test_score_stats_and_success_rate():
    stats = get_score_stats([4, -1, 9])
    assert (stats.highest, stats.lowest, stats.spread) == (9, -1, 10)
    assert stats.average == pytest.approx(4.0)
    assert get_score_stats([]).average == 0.0
    assert calculate_bid_success_rate(3, 4) == 0.75
    assert calculate_bid_success_rate(0, 0) == 0.0
    assert get_missed_whoopie_call_penalty() == -1


def test_progression_rises_then_falls():
    assert get_next_cards_per_player(4, "up", 5) == (5, "up")
    assert get_next_cards_per_player(5, "up", 5) == (4, "down")
    assert get_next_cards_per_player(3, "down", 5) == (2, "down")
    assert get_next_cards_per_player(1, "down", 5) == (2, "up")


def test_max_cards_leave_one_for_defining_card():
    assert get_max_cards_per_player(4) == 13
    assert get_max_cards_per_player(10) == 5
    assert get_max_cards_per_player(2) == 26
    assert get_total_stanzas_in_cycle(10) == 9


def test_full_cycle_walks_the_triangle():
    cards, direction = 1, "up"
    seen = [cards]
    for _ in range(get_total_stanzas_in_cycle(10) - 1):
        cards, direction = get_next_cards_per_player(cards, direction, 5)
        seen.append(cards)
    assert seen == [1, 2, 3, 4, 5, 4, 3, 2, 1]


def test_seat_rotation_wraps():
    assert get_next_player_index(3, 4) == 0
    assert get_first_bidder_index(1, 4) == 2


def test_can_start_stanza_checks_table_and_deck():
    can_start_stanza(4, 13)
    with pytest.raises(InsufficientPlayers):
        can_start_stanza(1, 1)
    with pytest.raises(InsufficientPlayers):
        can_start_stanza(11, 1)
    with pytest.raises(DeckExhausted):
        can_start_stanza(4, 14)
