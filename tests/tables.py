"""Hand-built tables for rules tests."""

from dataclasses import replace

from whoopie.cards import parse_card_string
from whoopie.game import add_player, create_game
from whoopie.state import GamePhase, HumanPlayer, StanzaState
from whoopie.trump import initial_trump_from_defining_card


def card(text):
    parsed = parse_card_string(text)
    assert parsed is not None, text
    return parsed


def seated_game(num_players, **settings):
    game = create_game("p0", settings or None, game_id="whoopie_test", now=0.0)
    for seat in range(num_players):
        game = add_player(game, HumanPlayer(id=f"p{seat}", name=f"Player {seat}")).game
    return game


def dealt_game(hands, defining, *, dealer, bids=None, phase=GamePhase.PLAYING, leader=None, direction="up"):
    """Seat ``len(hands)`` players and give them exactly these cards."""
    num_players = len(hands)
    game = seated_game(num_players)
    setup = initial_trump_from_defining_card(card(defining))
    stanza = StanzaState(
        stanza_number=1,
        cards_per_player=len(hands[0]),
        direction=direction,
        dealer_index=dealer,
        whoopie_defining_card=card(defining),
        whoopie_rank=setup.whoopie_rank,
        initial_trump_suit=setup.trump_suit,
        current_trump_suit=setup.trump_suit,
        j_trump_active=setup.j_trump_active,
        bids=tuple(bids) if bids is not None else (None,) * num_players,
        hands=tuple(tuple(card(text) for text in hand) for hand in hands),
        current_player_index=(dealer + 1) % num_players if leader is None else leader,
        tricks_taken=(0,) * num_players,
    )
    return replace(game, phase=phase, stanza=stanza, scorekeeper_index=(dealer + 1) % num_players)
