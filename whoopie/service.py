"""Host facade that owns games by id and applies commands one at a time."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from random import Random
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Sequence

from . import game as rules
from .cards import deserialize_card
from .encode import game_from_dict, game_to_dict
from .errors import GameNotFound, PlayerNotFound
from .events import GameEvent
from .game import Transition
from .settings import SettingsInput
from .state import AIDifficulty, AIPlayer, GameState, HumanPlayer
from .view import PlayerView, get_player_view

logger = logging.getLogger(__name__)

Command = Callable[[GameState], Transition]

# Most recent events kept per game; older ones are dropped.
EVENT_LOG_LIMIT = 500


@dataclass
class GameSession:
    game: GameState
    lock: threading.Lock = field(default_factory=threading.Lock)
    event_log: Deque[GameEvent] = field(default_factory=lambda: deque(maxlen=EVENT_LOG_LIMIT))


class GameService:
    """Keep every game's current state and serialize commands per game id.

    A command runs against the stored state under that game's lock; the
    stored state is replaced only if the command succeeds.
    """

    def __init__(self, *, seed: Optional[int] = None, event_log_limit: int = EVENT_LOG_LIMIT) -> None:
        self.rng = Random(seed)
        self.event_log_limit = event_log_limit
        self._sessions: Dict[str, GameSession] = {}
        self._registry_lock = threading.Lock()

    # Session lifecycle -------------------------------------------------

    def create_game(
        self,
        host_name: str,
        settings: SettingsInput = None,
        *,
        host_id: Optional[str] = None,
    ) -> Transition:
        """Create a game and seat its host."""
        host = HumanPlayer(id=host_id or rules.generate_player_id(), name=host_name)
        with self._registry_lock:
            game_id = rules.generate_game_id(self.rng)
            while game_id in self._sessions:
                game_id = rules.generate_game_id(self.rng)
            game = rules.create_game(host.id, settings, game_id=game_id)
            transition = rules.add_player(game, host)
            self._sessions[game_id] = self._new_session(transition.game, transition.events)
        logger.info("Created game %s for host %s", game_id, host.id)
        return transition

    def get_game(self, game_id: str) -> GameState:
        return self._require_session(game_id).game

    def get_events(self, game_id: str) -> List[GameEvent]:
        return list(self._require_session(game_id).event_log)

    def list_games(self) -> List[str]:
        with self._registry_lock:
            return list(self._sessions)

    def discard_game(self, game_id: str) -> None:
        with self._registry_lock:
            if self._sessions.pop(game_id, None) is None:
                raise GameNotFound(f"Game {game_id!r} not found.")

    def snapshot(self, game_id: str) -> Dict[str, Any]:
        return game_to_dict(self.get_game(game_id))

    def restore(self, payload: Mapping[str, Any]) -> GameState:
        game = game_from_dict(payload)
        with self._registry_lock:
            self._sessions[game.id] = self._new_session(game)
        return game

    # Actions -----------------------------------------------------------

    def join_game(self, game_id: str, name: str, *, player_id: Optional[str] = None) -> Transition:
        player = HumanPlayer(id=player_id or rules.generate_player_id(), name=name)
        return self._apply(game_id, lambda game: rules.add_player(game, player))

    def add_ai(self, game_id: str, difficulty: AIDifficulty = AIDifficulty.BEGINNER) -> Transition:
        def command(game: GameState) -> Transition:
            name = f"Bot {len(game.players) + 1}"
            return rules.add_player(game, AIPlayer(id=rules.generate_player_id(), name=name, difficulty=difficulty))

        return self._apply(game_id, command)

    def leave_game(self, game_id: str, player_id: str) -> Transition:
        return self._apply(game_id, lambda game: rules.remove_player(game, player_id))

    def replace_with_ai(self, game_id: str, player_id: str) -> Transition:
        """Hand a seat to a beginner bot that keeps the same id, hand and score."""

        def command(game: GameState) -> Transition:
            seat = game.seat_of(player_id)
            if seat is None:
                raise PlayerNotFound(f"Player {player_id!r} is not in game {game.id}.")
            bot = AIPlayer(id=player_id, name=f"{game.players[seat].name}-bot")
            return rules.remove_player(game, player_id, replacement=bot)

        return self._apply(game_id, command)

    def remove_player_and_redeal(self, game_id: str, player_id: str) -> Transition:
        return self._apply(game_id, lambda game: rules.remove_player_and_redeal(game, player_id, rng=self.rng))

    def start_game(self, game_id: str) -> Transition:
        return self._apply(game_id, lambda game: rules.start_game(game, rng=self.rng))

    def place_bid(self, game_id: str, player_index: int, bid: int) -> Transition:
        return self._apply(game_id, lambda game: rules.place_bid(game, player_index, bid))

    def play_card(
        self,
        game_id: str,
        player_index: int,
        card_payload: Mapping[str, Any],
        *,
        called_whoopie: bool = False,
    ) -> Transition:
        card = deserialize_card(card_payload)
        return self._apply(game_id, lambda game: rules.play_card(game, player_index, card, called_whoopie))

    def continue_game(self, game_id: str) -> Transition:
        return self._apply(game_id, lambda game: rules.continue_game(game, rng=self.rng))

    def end_game(self, game_id: str) -> Transition:
        return self._apply(game_id, rules.end_game)

    # Views -------------------------------------------------------------

    def get_player_view(self, game_id: str, player_index: int) -> PlayerView:
        return get_player_view(self.get_game(game_id), player_index)

    # Helpers -----------------------------------------------------------

    def _new_session(self, game: GameState, events: Sequence[GameEvent] = ()) -> GameSession:
        return GameSession(game=game, event_log=deque(events, maxlen=self.event_log_limit))

    def _apply(self, game_id: str, command: Command) -> Transition:
        session = self._require_session(game_id)
        with session.lock:
            transition = command(session.game)
            session.game = transition.game
            session.event_log.extend(transition.events)
        return transition

    def _require_session(self, game_id: str) -> GameSession:
        with self._registry_lock:
            session = self._sessions.get(game_id)
        if session is None:
            raise GameNotFound(f"Game {game_id!r} not found.")
        return session
