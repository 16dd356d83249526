"""Simple bot arena for Whoopie."""

from __future__ import annotations

import argparse
from random import Random
from typing import Dict, Iterable, List, Sequence

from whoopie.events import GameEvent, WhoopieCallMissed
from whoopie.game import (
    add_player,
    continue_game,
    create_game,
    end_game,
    place_bid,
    play_card,
    start_game,
)
from whoopie.scoring import get_missed_whoopie_call_penalty
from whoopie.state import AIPlayer, GamePhase, GameState

from .base import BotStrategy
from .random_bot import RandomBot

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "first": BotStrategy,
    "random": RandomBot,
}


def _resolve_bidding(game: GameState, bots: Sequence[BotStrategy], events: List[GameEvent]) -> GameState:
    while game.phase == GamePhase.BIDDING:
        assert game.stanza is not None
        player = game.stanza.current_player_index
        transition = place_bid(game, player, bots[player].choose_bid(game, player))
        game = transition.game
        events.extend(transition.events)
    return game


def _play_out(
    game: GameState,
    bots: Sequence[BotStrategy],
    events: List[GameEvent],
    rng: Random,
) -> GameState:
    while game.phase in (GamePhase.PLAYING, GamePhase.TRICK_END):
        if game.phase == GamePhase.TRICK_END:
            transition = continue_game(game, rng=rng)
        else:
            assert game.stanza is not None
            player = game.stanza.current_player_index
            card, called = bots[player].play_card(game, player)
            transition = play_card(game, player, card, called)
        game = transition.game
        events.extend(transition.events)
    return game


def play_stanza(
    game: GameState,
    bots: Sequence[BotStrategy],
    *,
    rng: Random,
    events: List[GameEvent] | None = None,
) -> GameState:
    """Drive the current stanza from bidding to stanza end."""
    log = events if events is not None else []
    assert game.stanza is not None
    for seat, bot in enumerate(bots):
        bot.on_stanza_start(game, seat)
    game = _resolve_bidding(game, bots, log)
    return _play_out(game, bots, log, rng)


def run_match(
    bots: Sequence[BotStrategy],
    *,
    n_stanzas: int = 5,
    seed: int | None = None,
) -> dict:
    rng = Random(seed)
    game = create_game("arena", {"max_players": max(len(bots), 2)}, game_id="whoopie_arena")
    for seat, bot in enumerate(bots):
        game = add_player(game, AIPlayer(id=f"bot_{seat}", name=f"{bot.name} {seat}")).game

    events: List[GameEvent] = []
    transition = start_game(game, rng=rng)
    game = transition.game
    events.extend(transition.events)

    history = []
    for index in range(n_stanzas):
        game = play_stanza(game, bots, rng=rng, events=events)
        record = game.completed_stanzas[-1]
        history.append(
            {
                "cards_per_player": record.cards_per_player,
                "bids": list(record.bids),
                "tricks_taken": list(record.tricks_taken),
                "score_changes": list(record.score_changes),
            }
        )
        if index < n_stanzas - 1:
            transition = continue_game(game, rng=rng)
            game = transition.game
            events.extend(transition.events)

    finished = end_game(game)
    events.extend(finished.events)
    missed = [0] * len(bots)
    for event in events:
        if isinstance(event, WhoopieCallMissed):
            missed[event.player_index] += 1
    rankings = list(finished.events[-1].rankings)
    return {
        "scores": list(finished.game.scores),
        "rankings": rankings,
        "history": history,
        "missed_calls": missed,
        "missed_call_penalties": [count * get_missed_whoopie_call_penalty() for count in missed],
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a bot match.")
    parser.add_argument("--bots", nargs="+", default=["random", "random", "random", "random"], choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=5, help="Number of stanzas to play.")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    bots = [BOT_REGISTRY[name]() for name in args.bots]
    results = run_match(bots, n_stanzas=args.n, seed=args.seed)

    print(f"Scores after {args.n} stanzas: {results['scores']}")
    print(f"Rankings: {results['rankings']}")
    print(f"Missed Whoopie calls: {results['missed_calls']}")


if __name__ == "__main__":
    main()
