from random import Random

import pytest

from whoopie.errors import InsufficientPlayers, InvalidPhase, PlayerNotFound
from whoopie.game import remove_player, remove_player_and_redeal, start_game
from whoopie.state import AIPlayer, GamePhase

from tables import dealt_game, seated_game

FOUR_HANDS = [["A♥"], ["K♥"], ["2♠"], ["3♦"]]


def test_leaving_before_start_frees_the_seat():
    game = seated_game(3)
    transition = remove_player(game, "p1")
    assert [player.id for player in transition.game.players] == ["p0", "p2"]
    assert transition.game.scores == (0, 0)
    assert transition.events[0].player_name == "Player 1"
    with pytest.raises(PlayerNotFound):
        remove_player(game, "ghost")


def test_replacement_required_once_started():
    game = start_game(seated_game(3), rng=Random(4)).game
    with pytest.raises(InvalidPhase):
        remove_player(game, "p1")


def test_replacement_keeps_seat_hand_and_score():
    game = start_game(seated_game(3), rng=Random(4)).game
    bot = AIPlayer(id="bot_1", name="Player 1-bot")
    transition = remove_player(game, "p1", replacement=bot)

    assert transition.game.players[1] == bot
    assert transition.game.stanza == game.stanza
    assert transition.game.scores == game.scores
    assert transition.events[0].replacement == bot


def test_redeal_shifts_dealer_and_scorekeeper_down():
    game = dealt_game(FOUR_HANDS, "7♠", dealer=2, phase=GamePhase.BIDDING)
    transition = remove_player_and_redeal(game, "p0", rng=Random(8))
    redealt = transition.game

    assert [event.type for event in transition.events] == ["playerLeft", "stanzaRedealt", "stanzaStarted"]
    assert transition.events[1].reason == "Player removed from game"
    assert [player.id for player in redealt.players] == ["p1", "p2", "p3"]
    assert redealt.stanza.dealer_index == 1
    assert redealt.scorekeeper_index == 2
    assert redealt.stanza.cards_per_player == 1
    assert redealt.phase is GamePhase.BIDDING
    assert redealt.stanza.bids == (None, None, None)
    assert sum(len(hand) for hand in redealt.stanza.hands) + 1 + len(redealt.stanza.undealt) == 54


def test_removing_the_dealer_passes_the_deal_on():
    game = dealt_game(FOUR_HANDS, "7♠", dealer=3, phase=GamePhase.PLAYING)
    redealt = remove_player_and_redeal(game, "p3", rng=Random(8)).game
    assert redealt.stanza.dealer_index == 0
    assert redealt.scorekeeper_index == 0


def test_removing_the_scorekeeper_hands_it_after_the_dealer():
    game = dealt_game(FOUR_HANDS, "7♠", dealer=1, phase=GamePhase.PLAYING)
    redealt = remove_player_and_redeal(game, "p2", rng=Random(8)).game
    assert redealt.stanza.dealer_index == 1
    assert redealt.scorekeeper_index == 2


def test_removal_at_stanza_end_deals_the_next_stanza():
    game = dealt_game(FOUR_HANDS, "7♠", dealer=2, phase=GamePhase.STANZA_END)
    redealt = remove_player_and_redeal(game, "p3", rng=Random(8)).game
    assert redealt.stanza.cards_per_player == 2
    assert redealt.stanza.dealer_index == 0
    assert redealt.phase is GamePhase.BIDDING


def test_redeal_needs_more_than_two_players():
    game = dealt_game([["A♥"], ["K♥"]], "7♠", dealer=0, phase=GamePhase.BIDDING)
    with pytest.raises(InsufficientPlayers):
        remove_player_and_redeal(game, "p1")
