from random import Random

import pytest

from whoopie.cards import Suit
from whoopie.errors import (
    DuplicatePlayer,
    GameFull,
    InsufficientPlayers,
    InvalidBid,
    InvalidPhase,
    InvalidPlay,
    NotYourTurn,
    PlayerNotFound,
)
from whoopie.events import CardPlayed, StanzaCompleted, TrickCompleted, WhoopieCallMissed
from whoopie.game import (
    add_player,
    continue_game,
    create_game,
    end_game,
    get_valid_actions,
    is_players_turn,
    must_call_whoopie,
    place_bid,
    play_card,
    start_game,
)
from whoopie.state import GamePhase, HumanPlayer

from tables import card, dealt_game, seated_game


def cards_on_table(game):
    stanza = game.stanza
    return sum(len(hand) for hand in stanza.hands) + 1 + len(stanza.undealt)


def test_create_game_waits_for_players():
    game = create_game("host", {"max_players": 4}, game_id="whoopie_abcde", now=12.0)
    assert game.phase is GamePhase.WAITING
    assert game.settings.max_players == 4
    assert game.players == ()
    assert game.created_at == 12.0


def test_start_game_cuts_and_deals_one_card():
    game = seated_game(4)
    transition = start_game(game, rng=Random(9))
    started = transition.game
    stanza = started.stanza

    assert [event.type for event in transition.events] == ["gameStarted", "cutForDealer", "stanzaStarted"]
    assert transition.events[1].dealer_index == stanza.dealer_index
    assert started.phase is GamePhase.BIDDING
    assert stanza.cards_per_player == 1 and stanza.direction == "up"
    assert started.scorekeeper_index == (stanza.dealer_index + 1) % 4
    assert stanza.current_player_index == (stanza.dealer_index + 1) % 4
    assert cards_on_table(started) == 54
    assert game.phase is GamePhase.WAITING


def test_start_requires_enough_players():
    with pytest.raises(InsufficientPlayers):
        start_game(seated_game(1))
    with pytest.raises(InsufficientPlayers):
        start_game(seated_game(2, min_players_to_start=3))


def test_seating_rules():
    game = seated_game(2, max_players=2)
    with pytest.raises(GameFull):
        add_player(game, HumanPlayer(id="late", name="Late"))
    with pytest.raises(DuplicatePlayer):
        add_player(seated_game(1), HumanPlayer(id="p0", name="Again"))
    started = start_game(seated_game(2), rng=Random(1)).game
    with pytest.raises(InvalidPhase):
        add_player(started, HumanPlayer(id="late", name="Late"))


def test_bidding_runs_clockwise_and_ends_with_the_dealer():
    game = dealt_game([["A♥"], ["K♥"], ["2♠"]], "7♠", dealer=2, phase=GamePhase.BIDDING)
    assert get_valid_actions(game).can_bid == (0, 1)

    game = place_bid(game, 0, 1).game
    game = place_bid(game, 1, 0).game
    assert game.stanza.current_player_index == 2
    assert get_valid_actions(game).can_bid == (1,)

    with pytest.raises(InvalidBid):
        place_bid(game, 2, 0)

    transition = place_bid(game, 2, 1)
    assert transition.game.phase is GamePhase.PLAYING
    assert transition.game.stanza.bids == (1, 0, 1)
    assert transition.game.stanza.current_player_index == 0
    assert [event.type for event in transition.events] == ["bidPlaced"]


def test_rejected_command_leaves_state_untouched():
    game = dealt_game([["A♥"], ["K♥"], ["2♠"]], "7♠", dealer=2, phase=GamePhase.BIDDING)
    with pytest.raises(NotYourTurn):
        place_bid(game, 1, 0)
    with pytest.raises(PlayerNotFound):
        place_bid(game, 7, 0)
    with pytest.raises(InvalidPhase):
        play_card(game, 0, card("A♥"))
    assert game.stanza.bids == (None, None, None)
    assert game.stanza.current_player_index == 0


def test_one_card_stanza_scores_and_advances():
    game = dealt_game([["A♥"], ["K♥"], ["2♠"]], "7♠", dealer=2, bids=(1, 0, 0), leader=0)
    game = play_card(game, 0, card("A♥")).game
    game = play_card(game, 1, card("K♥")).game
    transition = play_card(game, 2, card("2♠"))
    finished = transition.game

    assert [type(event) for event in transition.events] == [CardPlayed, TrickCompleted, StanzaCompleted]
    assert transition.events[1].trick.winner_index == 2
    assert finished.phase is GamePhase.STANZA_END
    assert finished.stanza.tricks_taken == (0, 0, 1)
    assert finished.scores == (-1, 2, -1)
    assert finished.completed_stanzas[0].score_changes == (-1, 2, -1)
    assert finished.truncated_average == 0

    following = continue_game(finished, rng=Random(2)).game
    assert following.phase is GamePhase.BIDDING
    assert following.stanza.stanza_number == 2
    assert following.stanza.cards_per_player == 2
    assert following.stanza.dealer_index == 0
    assert following.scores == (-1, 2, -1)
    assert cards_on_table(following) == 54


def test_must_follow_suit_and_hold_the_card():
    game = dealt_game([["A♥", "2♣"], ["K♥", "3♣"], ["2♠", "Q♥"]], "7♠", dealer=2, bids=(1, 0, 0), leader=0)
    game = play_card(game, 0, card("A♥")).game
    with pytest.raises(InvalidPlay):
        play_card(game, 1, card("3♣"))
    with pytest.raises(InvalidPlay):
        play_card(game, 1, card("A♠"))
    with pytest.raises(NotYourTurn):
        play_card(game, 2, card("Q♥"))


def test_trick_pause_keeps_cards_visible_until_continue():
    game = dealt_game([["A♥", "2♣"], ["K♥", "3♣"], ["2♠", "Q♣"]], "7♠", dealer=2, bids=(1, 0, 0), leader=0)
    for seat, text in [(0, "A♥"), (1, "K♥"), (2, "2♠")]:
        game = play_card(game, seat, card(text)).game

    assert game.phase is GamePhase.TRICK_END
    assert len(game.stanza.current_trick) == 3
    assert game.stanza.current_player_index == 2
    assert game.stanza.current_trick_number == 2
    assert not is_players_turn(game, 2)
    with pytest.raises(InvalidPhase):
        play_card(game, 2, card("Q♣"))

    resumed = continue_game(game).game
    assert resumed.phase is GamePhase.PLAYING
    assert resumed.stanza.current_trick == ()
    assert is_players_turn(resumed, 2)
    assert get_valid_actions(resumed).can_play == (card("Q♣"),)


def test_whoopie_card_moves_trump_and_freezes_earlier_cards():
    game = dealt_game([["A♥"], ["7♣"], ["K♥"]], "7♠", dealer=2, bids=(1, 0, 0), leader=0)
    game = play_card(game, 0, card("A♥")).game
    transition = play_card(game, 1, card("7♣"), called_whoopie=True)

    assert [event.type for event in transition.events] == ["cardPlayed"]
    played_event = transition.events[0]
    assert played_event.was_whoopie
    assert played_event.new_trump_suit is Suit.CLUBS
    stanza = transition.game.stanza
    assert stanza.current_trump_suit is Suit.CLUBS
    assert [played.trump_suit_at_play for played in stanza.current_trick] == [Suit.SPADES, Suit.SPADES]

    done = play_card(transition.game, 2, card("K♥"))
    assert done.events[-2].trick.winner_index == 1


def test_missed_whoopie_call_is_reported_before_the_play():
    game = dealt_game([["A♥"], ["7♣"], ["K♥"]], "7♠", dealer=2, bids=(1, 0, 0), leader=0)
    game = play_card(game, 0, card("A♥")).game
    assert must_call_whoopie(game, card("7♣"))

    transition = play_card(game, 1, card("7♣"))
    assert [type(event) for event in transition.events] == [WhoopieCallMissed, CardPlayed]
    assert transition.events[0].player_index == 1
    assert transition.game.stanza.current_trump_suit is Suit.CLUBS


def test_joker_played_mid_trick_sets_j_trump():
    game = dealt_game([["A♥"], ["Joker1"], ["K♥"]], "7♠", dealer=2, bids=(1, 0, 0), leader=0)
    game = play_card(game, 0, card("A♥")).game
    assert not must_call_whoopie(game, card("Joker1"))
    transition = play_card(game, 1, card("Joker1"))
    assert transition.events[0].was_scramble
    assert transition.game.stanza.j_trump_active
    assert transition.game.stanza.current_trump_suit is Suit.HEARTS


def test_end_game_ranks_players():
    game = dealt_game([["A♥"], ["K♥"], ["2♠"]], "7♠", dealer=2, bids=(1, 0, 0), leader=0)
    for seat, text in [(0, "A♥"), (1, "K♥"), (2, "2♠")]:
        game = play_card(game, seat, card(text)).game

    transition = end_game(game)
    assert transition.game.phase is GamePhase.GAME_END
    assert transition.events[0].final_scores == (-1, 2, -1)
    assert transition.events[0].rankings == (2, 1, 2)
    with pytest.raises(InvalidPhase):
        end_game(transition.game)
    with pytest.raises(InvalidPhase):
        end_game(seated_game(3))


def test_continue_outside_a_pause_is_rejected():
    game = dealt_game([["A♥"], ["K♥"], ["2♠"]], "7♠", dealer=2, phase=GamePhase.BIDDING)
    with pytest.raises(InvalidPhase):
        continue_game(game)
