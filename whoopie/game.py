"""Stanza and game state machine for Whoopie.

Every command takes a ``GameState`` and returns a ``Transition`` holding the
replacement state and the events it produced. Commands validate fully before
building anything, so a rejected command raises and the caller's state is
untouched. Nothing here locks; the host must apply commands for one game id
one at a time.
"""

from __future__ import annotations

import logging
import string
import time
import uuid
from dataclasses import dataclass, replace
from random import Random
from typing import List, Optional, Sequence, Tuple

from .bidding import all_bids_placed, get_valid_bids, is_valid_bid
from .cards import Card, card_to_string, cards_equal
from .deck import cut_for_dealer, deal_cards, shuffle_deck, create_deck
from .errors import (
    DuplicatePlayer,
    GameFull,
    InsufficientPlayers,
    InvalidBid,
    InvalidPhase,
    InvalidPlay,
    NotYourTurn,
    PlayerNotFound,
)
from .events import (
    BidPlaced,
    CardPlayed,
    CutForDealer,
    GameEnded,
    GameEvent,
    GameStarted,
    PlayerJoined,
    PlayerLeft,
    StanzaCompleted,
    StanzaRedealt,
    StanzaStarted,
    TrickCompleted,
    WhoopieCallMissed,
)
from .mechanics import (
    MIN_PLAYERS,
    Direction,
    can_start_stanza,
    get_first_bidder_index,
    get_first_leader_index,
    get_max_cards_per_player,
    get_next_cards_per_player,
    get_next_player_index,
    get_valid_cards,
    is_valid_play,
)
from .scoring import apply_score_changes, calculate_rankings, calculate_stanza_scores, calculate_truncated_average
from .settings import SettingsInput, resolve_settings
from .state import CompletedStanzaRecord, GamePhase, GameState, Player, StanzaState
from .trick import PlayedCard, create_completed_trick, get_lead_suit
from .trump import initial_trump_from_defining_card, play_transition, requires_whoopie_call

logger = logging.getLogger(__name__)

GAME_ID_PREFIX = "whoopie_"
GAME_ID_ALPHABET = string.ascii_lowercase + string.digits
GAME_ID_LENGTH = 5

IN_PROGRESS_PHASES = (
    GamePhase.BIDDING,
    GamePhase.PLAYING,
    GamePhase.TRICK_END,
    GamePhase.STANZA_END,
)


@dataclass(frozen=True)
class Transition:
    game: GameState
    events: Tuple[GameEvent, ...] = ()


@dataclass(frozen=True)
class ValidActions:
    can_bid: Tuple[int, ...] = ()
    can_play: Tuple[Card, ...] = ()


# Identity ----------------------------------------------------------------


def generate_game_id(rng: Optional[Random] = None) -> str:
    if rng is None:
        rng = Random()
    suffix = "".join(rng.choice(GAME_ID_ALPHABET) for _ in range(GAME_ID_LENGTH))
    return f"{GAME_ID_PREFIX}{suffix}"


def generate_player_id() -> str:
    return f"player_{uuid.uuid4().hex[:12]}"


def create_game(
    host_id: str,
    settings: SettingsInput = None,
    *,
    game_id: Optional[str] = None,
    now: Optional[float] = None,
) -> GameState:
    """Create an empty game waiting for players."""
    return GameState(
        id=game_id or generate_game_id(),
        host_id=host_id,
        created_at=time.time() if now is None else now,
        settings=resolve_settings(settings),
    )


# Guards ------------------------------------------------------------------


def _require_phase(game: GameState, *phases: GamePhase) -> None:
    if game.phase not in phases:
        expected = ", ".join(str(phase) for phase in phases)
        raise InvalidPhase(f"Action not allowed in phase {game.phase}. Expected {expected}.")


def _require_stanza(game: GameState) -> StanzaState:
    if game.stanza is None:
        raise InvalidPhase("No active stanza.")
    return game.stanza


def _require_seat(game: GameState, player_index: int) -> Player:
    if not 0 <= player_index < len(game.players):
        raise PlayerNotFound(f"No player at seat {player_index}.")
    return game.players[player_index]


def _require_player_id(game: GameState, player_id: str) -> int:
    seat = game.seat_of(player_id)
    if seat is None:
        raise PlayerNotFound(f"Player {player_id!r} is not in game {game.id}.")
    return seat


def _require_turn(stanza: StanzaState, player_index: int) -> None:
    if player_index != stanza.current_player_index:
        raise NotYourTurn(f"It is seat {stanza.current_player_index}'s turn, not seat {player_index}'s.")


# Player management -------------------------------------------------------


def add_player(game: GameState, player: Player) -> Transition:
    _require_phase(game, GamePhase.WAITING)
    if len(game.players) >= game.settings.max_players:
        raise GameFull(f"Game {game.id} already has {game.settings.max_players} players.")
    if game.seat_of(player.id) is not None:
        raise DuplicatePlayer(f"Player {player.id!r} is already in the game.")

    updated = replace(game, players=game.players + (player,), scores=game.scores + (0,))
    return Transition(updated, (PlayerJoined(player),))


def _without_seat(values: Sequence, seat: int) -> tuple:
    return tuple(value for index, value in enumerate(values) if index != seat)


def remove_player(game: GameState, player_id: str, replacement: Optional[Player] = None) -> Transition:
    """Drop a player before the game starts, or hand their seat to a replacement.

    Once the game is under way a replacement is required; it inherits the
    seat, hand, bid and score unchanged.
    """
    seat = _require_player_id(game, player_id)
    leaving = game.players[seat]

    if game.phase is GamePhase.WAITING:
        updated = replace(
            game,
            players=_without_seat(game.players, seat),
            scores=_without_seat(game.scores, seat),
        )
        return Transition(updated, (PlayerLeft(player_id, leaving.name),))

    _require_phase(game, *IN_PROGRESS_PHASES)
    if replacement is None:
        raise InvalidPhase("A replacement player is required once the game has started.")
    other = game.seat_of(replacement.id)
    if other is not None and other != seat:
        raise DuplicatePlayer(f"Player {replacement.id!r} already holds seat {other}.")

    players = list(game.players)
    players[seat] = replacement
    updated = replace(game, players=tuple(players))
    logger.info("Game %s: seat %s handed from %s to %s", game.id, seat, player_id, replacement.id)
    return Transition(updated, (PlayerLeft(player_id, leaving.name, replacement),))


def _shift_index_after_removal(index: int, removed: int, remaining: int) -> int:
    if removed < index:
        index -= 1
    elif removed == index:
        # The next seat slides into the removed position.
        index = index % remaining
    if index >= remaining:
        index = 0
    return index


def remove_player_and_redeal(game: GameState, player_id: str, *, rng: Optional[Random] = None) -> Transition:
    """Remove a seat mid-game and deal the current stanza again from scratch.

    A partial trick missing one participant has no defined winner, so the
    stanza is rebuilt with a fresh shuffle, defining card and trump. At
    stanza end the upcoming stanza is dealt instead.
    """
    seat = _require_player_id(game, player_id)
    leaving = game.players[seat]

    if game.phase is GamePhase.WAITING:
        return remove_player(game, player_id)

    _require_phase(game, *IN_PROGRESS_PHASES)
    stanza = _require_stanza(game)
    if len(game.players) <= MIN_PLAYERS:
        raise InsufficientPlayers(f"Cannot remove a player: fewer than {MIN_PLAYERS} would remain.")

    players = _without_seat(game.players, seat)
    remaining = len(players)
    dealer_index = _shift_index_after_removal(stanza.dealer_index, seat, remaining)

    scorekeeper_index = game.scorekeeper_index
    if scorekeeper_index is not None:
        if seat == scorekeeper_index:
            scorekeeper_index = (dealer_index + 1) % remaining
        else:
            scorekeeper_index = _shift_index_after_removal(scorekeeper_index, seat, remaining)

    cards_per_player = stanza.cards_per_player
    direction = stanza.direction
    if game.phase is GamePhase.STANZA_END:
        cards_per_player, direction = get_next_cards_per_player(
            cards_per_player, direction, get_max_cards_per_player(remaining)
        )
        dealer_index = get_next_player_index(dealer_index, remaining)

    base = replace(
        game,
        players=players,
        scores=_without_seat(game.scores, seat),
        scorekeeper_index=scorekeeper_index,
        stanza=None,
    )
    dealt = _deal_stanza(base, dealer_index, cards_per_player, direction, rng=rng)
    logger.info("Game %s: removed %s and redealt stanza %s", game.id, player_id, dealt.game.stanza.stanza_number)
    events: Tuple[GameEvent, ...] = (
        PlayerLeft(player_id, leaving.name),
        StanzaRedealt("Player removed from game"),
    )
    return Transition(dealt.game, events + dealt.events)


# Game start and stanza setup ---------------------------------------------


def start_game(game: GameState, *, rng: Optional[Random] = None) -> Transition:
    """Cut for dealer and deal the first one-card stanza."""
    _require_phase(game, GamePhase.WAITING)
    required = max(game.settings.min_players_to_start, MIN_PLAYERS)
    if len(game.players) < required:
        raise InsufficientPlayers(f"Need at least {required} players.")
    can_start_stanza(len(game.players), 1)

    cut_cards, dealer_index = cut_for_dealer(len(game.players), rng=rng)
    scorekeeper_index = get_next_player_index(dealer_index, len(game.players))
    logger.info(
        "Game %s: cut %s, seat %s deals",
        game.id,
        [card_to_string(card) for card in cut_cards],
        dealer_index,
    )

    events: Tuple[GameEvent, ...] = (GameStarted(), CutForDealer(tuple(cut_cards), dealer_index))
    dealt = _deal_stanza(replace(game, scorekeeper_index=scorekeeper_index), dealer_index, 1, "up", rng=rng)
    return Transition(dealt.game, events + dealt.events)


def start_stanza(
    game: GameState,
    dealer_index: int,
    cards_per_player: int,
    direction: Direction,
    *,
    rng: Optional[Random] = None,
) -> Transition:
    if game.phase in (GamePhase.WAITING, GamePhase.GAME_END):
        raise InvalidPhase(f"Cannot deal a stanza in phase {game.phase}.")
    _require_seat(game, dealer_index)
    return _deal_stanza(game, dealer_index, cards_per_player, direction, rng=rng)


def _deal_stanza(
    game: GameState,
    dealer_index: int,
    cards_per_player: int,
    direction: Direction,
    *,
    rng: Optional[Random] = None,
) -> Transition:
    num_players = len(game.players)
    can_start_stanza(num_players, cards_per_player)

    deck = shuffle_deck(create_deck(), rng=rng)
    hands, remaining = deal_cards(deck, num_players, cards_per_player, get_next_player_index(dealer_index, num_players))
    defining_card = remaining[0]
    setup = initial_trump_from_defining_card(defining_card)

    stanza = StanzaState(
        stanza_number=len(game.completed_stanzas) + 1,
        cards_per_player=cards_per_player,
        direction=direction,
        dealer_index=dealer_index,
        whoopie_defining_card=defining_card,
        whoopie_rank=setup.whoopie_rank,
        initial_trump_suit=setup.trump_suit,
        current_trump_suit=setup.trump_suit,
        j_trump_active=setup.j_trump_active,
        bids=(None,) * num_players,
        hands=tuple(tuple(hand) for hand in hands),
        current_player_index=get_first_bidder_index(dealer_index, num_players),
        tricks_taken=(0,) * num_players,
        undealt=tuple(remaining[1:]),
    )
    logger.info(
        "Game %s: stanza %s, %s card(s) %s, dealer %s, defining card %s",
        game.id,
        stanza.stanza_number,
        cards_per_player,
        direction,
        dealer_index,
        card_to_string(defining_card),
    )
    updated = replace(game, phase=GamePhase.BIDDING, stanza=stanza)
    return Transition(updated, (StanzaStarted(stanza),))


# Bidding -----------------------------------------------------------------


def place_bid(game: GameState, player_index: int, bid: int) -> Transition:
    _require_phase(game, GamePhase.BIDDING)
    stanza = _require_stanza(game)
    _require_seat(game, player_index)
    _require_turn(stanza, player_index)

    if not is_valid_bid(bid, player_index, stanza.dealer_index, stanza.cards_per_player, stanza.bids):
        allowed = get_valid_bids(player_index, stanza.dealer_index, stanza.cards_per_player, stanza.bids)
        raise InvalidBid(f"Bid {bid} is not allowed; valid bids are {allowed}.")

    bids = list(stanza.bids)
    bids[player_index] = bid
    events: Tuple[GameEvent, ...] = (BidPlaced(player_index, bid),)

    if all_bids_placed(bids):
        leader = get_first_leader_index(stanza.dealer_index, len(game.players))
        updated_stanza = replace(stanza, bids=tuple(bids), current_player_index=leader)
        return Transition(replace(game, phase=GamePhase.PLAYING, stanza=updated_stanza), events)

    updated_stanza = replace(
        stanza,
        bids=tuple(bids),
        current_player_index=get_next_player_index(player_index, len(game.players)),
    )
    return Transition(replace(game, stanza=updated_stanza), events)


# Card play ---------------------------------------------------------------


def play_card(game: GameState, player_index: int, card: Card, called_whoopie: bool = False) -> Transition:
    """Play a card for the current seat.

    ``called_whoopie`` is the player's own report of announcing the card;
    failing to announce a Whoopie card does not reject the play but emits
    ``WhoopieCallMissed``.
    """
    _require_phase(game, GamePhase.PLAYING)
    stanza = _require_stanza(game)
    player = _require_seat(game, player_index)
    _require_turn(stanza, player_index)

    hand = stanza.hands[player_index]
    if not any(cards_equal(held, card) for held in hand):
        raise InvalidPlay(f"{card_to_string(card)} is not in seat {player_index}'s hand.")
    if not is_valid_play(card, hand, stanza.current_trick):
        raise InvalidPlay(f"{card_to_string(card)} does not follow the led suit.")

    is_lead = not stanza.current_trick
    lead_suit = None if is_lead else get_lead_suit(stanza.current_trick)
    at_play, change = play_transition(stanza.trump_state, card, lead_suit, is_lead)

    events: List[GameEvent] = []
    if requires_whoopie_call(card, at_play.whoopie_rank) and not called_whoopie:
        logger.info("Game %s: seat %s missed a Whoopie call", game.id, player_index)
        events.append(WhoopieCallMissed(player_index))

    played = PlayedCard(
        card=card,
        player_id=player.id,
        player_index=player_index,
        trump_suit_at_play=at_play.trump_suit,
        j_trump_active_at_play=at_play.j_trump_active,
        was_whoopie=change.was_whoopie,
        was_scramble=change.was_scramble,
    )
    events.append(
        CardPlayed(
            player_index=player_index,
            card=card,
            was_whoopie=change.was_whoopie,
            was_scramble=change.was_scramble,
            new_trump_suit=change.new_trump_suit,
        )
    )

    hands = list(stanza.hands)
    hands[player_index] = tuple(held for held in hand if not cards_equal(held, card))
    updated_stanza = replace(
        stanza,
        hands=tuple(hands),
        current_trick=stanza.current_trick + (played,),
        current_trump_suit=change.new_trump_suit,
        whoopie_rank=at_play.whoopie_rank,
        j_trump_active=change.new_j_trump_active,
        current_player_index=get_next_player_index(player_index, len(game.players)),
    )

    if len(updated_stanza.current_trick) == len(game.players):
        return _complete_trick(game, updated_stanza, events)
    return Transition(replace(game, stanza=updated_stanza), tuple(events))


def _complete_trick(game: GameState, stanza: StanzaState, events: List[GameEvent]) -> Transition:
    completed = create_completed_trick(stanza.current_trick, stanza.whoopie_rank)
    events.append(TrickCompleted(completed))

    tricks_taken = list(stanza.tricks_taken)
    tricks_taken[completed.winner_index] += 1
    # The finished trick stays in current_trick so the table can show it.
    stanza = replace(
        stanza,
        completed_tricks=stanza.completed_tricks + (completed,),
        tricks_taken=tuple(tricks_taken),
        current_player_index=completed.winner_index,
    )
    logger.debug(
        "Game %s: trick %s taken by seat %s",
        game.id,
        stanza.current_trick_number,
        completed.winner_index,
    )

    if stanza.is_complete():
        return _complete_stanza(game, stanza, events)

    stanza = replace(stanza, current_trick_number=stanza.current_trick_number + 1)
    return Transition(replace(game, phase=GamePhase.TRICK_END, stanza=stanza), tuple(events))


def _complete_stanza(game: GameState, stanza: StanzaState, events: List[GameEvent]) -> Transition:
    bids = tuple(bid if bid is not None else 0 for bid in stanza.bids)
    score_changes = tuple(calculate_stanza_scores(bids, stanza.tricks_taken))
    new_scores = tuple(apply_score_changes(game.scores, score_changes))
    events.append(StanzaCompleted(score_changes, new_scores))

    record = CompletedStanzaRecord(
        stanza_number=stanza.stanza_number,
        cards_per_player=stanza.cards_per_player,
        dealer_index=stanza.dealer_index,
        whoopie_defining_card=stanza.whoopie_defining_card,
        bids=bids,
        tricks_taken=stanza.tricks_taken,
        score_changes=score_changes,
        player_ids=tuple(player.id for player in game.players),
    )
    logger.info("Game %s: stanza %s scored %s", game.id, stanza.stanza_number, list(score_changes))
    updated = replace(
        game,
        phase=GamePhase.STANZA_END,
        scores=new_scores,
        stanza=stanza,
        completed_stanzas=game.completed_stanzas + (record,),
        truncated_average=calculate_truncated_average(new_scores),
    )
    return Transition(updated, tuple(events))


# Progression -------------------------------------------------------------


def continue_game(game: GameState, *, rng: Optional[Random] = None) -> Transition:
    """Advance past a pause: clear a finished trick, or deal the next stanza."""
    if game.phase is GamePhase.STANZA_END:
        return continue_to_next_stanza(game, rng=rng)
    _require_phase(game, GamePhase.TRICK_END)
    stanza = _require_stanza(game)
    updated = replace(game, phase=GamePhase.PLAYING, stanza=replace(stanza, current_trick=()))
    return Transition(updated)


def continue_to_next_stanza(game: GameState, *, rng: Optional[Random] = None) -> Transition:
    _require_phase(game, GamePhase.STANZA_END)
    stanza = _require_stanza(game)
    num_players = len(game.players)
    cards_per_player, direction = get_next_cards_per_player(
        stanza.cards_per_player,
        stanza.direction,
        get_max_cards_per_player(num_players),
    )
    dealer_index = get_next_player_index(stanza.dealer_index, num_players)
    return _deal_stanza(game, dealer_index, cards_per_player, direction, rng=rng)


def end_game(game: GameState) -> Transition:
    """Finish the game and rank the players by score."""
    _require_phase(game, *IN_PROGRESS_PHASES)
    rankings = tuple(calculate_rankings(game.scores))
    logger.info("Game %s ended: scores %s rankings %s", game.id, list(game.scores), list(rankings))
    updated = replace(game, phase=GamePhase.GAME_END)
    return Transition(updated, (GameEnded(final_scores=game.scores, rankings=rankings),))


# Queries -----------------------------------------------------------------


def get_valid_actions(game: GameState) -> ValidActions:
    stanza = game.stanza
    if stanza is None:
        return ValidActions()
    seat = stanza.current_player_index
    if game.phase is GamePhase.BIDDING:
        bids = get_valid_bids(seat, stanza.dealer_index, stanza.cards_per_player, stanza.bids)
        return ValidActions(can_bid=tuple(bids))
    if game.phase is GamePhase.PLAYING:
        return ValidActions(can_play=tuple(get_valid_cards(stanza.hands[seat], stanza.current_trick)))
    return ValidActions()


def is_players_turn(game: GameState, player_index: int) -> bool:
    if game.stanza is None:
        return False
    if game.phase not in (GamePhase.BIDDING, GamePhase.PLAYING):
        return False
    return game.stanza.current_player_index == player_index


def must_call_whoopie(game: GameState, card: Card) -> bool:
    """Return True if playing ``card`` now would require a Whoopie call."""
    stanza = _require_stanza(game)
    is_lead = not stanza.current_trick
    lead_suit = None if is_lead else get_lead_suit(stanza.current_trick)
    at_play, _ = play_transition(stanza.trump_state, card, lead_suit, is_lead)
    return requires_whoopie_call(card, at_play.whoopie_rank)
