"""REST service hosting Whoopie tables."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from whoopie.encode import event_to_dict, player_to_dict, player_view_to_dict
from whoopie.errors import GameNotFound, InvalidPhase, NotYourTurn, PlayerNotFound, WhoopieError
from whoopie.events import GameEvent, StanzaStarted
from whoopie.game import Transition
from whoopie.settings import GameSettings
from whoopie.state import AIDifficulty
from whoopie.service import GameService

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    PlayerNotFound: 404,
    GameNotFound: 404,
    NotYourTurn: 409,
    InvalidPhase: 409,
}


class CreateRequest(BaseModel):
    host_name: str = Field(min_length=1)
    settings: Optional[GameSettings] = None


class JoinRequest(BaseModel):
    name: str = Field(min_length=1)


class AIRequest(BaseModel):
    difficulty: Literal["beginner", "intermediate", "expert"] = "beginner"


class BidRequest(BaseModel):
    seat: int
    bid: int


class PlayRequest(BaseModel):
    seat: int
    card: Dict[str, Any]
    called_whoopie: bool = False


class RemoveRequest(BaseModel):
    player_id: str
    mode: Literal["leave", "replace", "redeal"] = "replace"


service = GameService()

app = FastAPI(title="Whoopie Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_for(exc: WhoopieError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 400


@app.exception_handler(WhoopieError)
def handle_rule_violation(request: Request, exc: WhoopieError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_for(exc), content={"code": exc.code, "detail": str(exc)})


def encode_events(events: List[GameEvent], viewer: Optional[int]) -> List[Dict[str, Any]]:
    """Encode events for one seat; without a viewer no hands are sent at all."""
    encoded: List[Dict[str, Any]] = []
    for event in events:
        if viewer is None and isinstance(event, StanzaStarted):
            encoded.append({"type": event.type, "stanza_number": event.stanza.stanza_number})
        else:
            encoded.append(event_to_dict(event, viewer))
    return encoded


def check_viewer(game_id: str, viewer: Optional[int]) -> None:
    if viewer is not None and not 0 <= viewer < len(service.get_game(game_id).players):
        raise PlayerNotFound(f"No player at seat {viewer}.")


def respond(transition: Transition, viewer: Optional[int] = None) -> Dict[str, object]:
    return {
        "game_id": transition.game.id,
        "phase": str(transition.game.phase),
        "events": encode_events(list(transition.events), viewer),
    }


@app.get("/games")
def list_games() -> Dict[str, object]:
    return {"games": service.list_games()}


@app.post("/games")
def create_game(request: CreateRequest) -> Dict[str, object]:
    transition = service.create_game(request.host_name, request.settings)
    body = respond(transition, viewer=0)
    body["player_id"] = transition.game.host_id
    return body


@app.post("/games/{game_id}/join")
def join_game(game_id: str, request: JoinRequest) -> Dict[str, object]:
    transition = service.join_game(game_id, request.name)
    player = transition.game.players[-1]
    body = respond(transition)
    body["player"] = player_to_dict(player)
    body["seat"] = len(transition.game.players) - 1
    return body


@app.post("/games/{game_id}/ai")
def add_ai(game_id: str, request: AIRequest) -> Dict[str, object]:
    transition = service.add_ai(game_id, AIDifficulty[request.difficulty.upper()])
    body = respond(transition)
    body["player"] = player_to_dict(transition.game.players[-1])
    return body


@app.post("/games/{game_id}/start")
def start_game(game_id: str, viewer: Optional[int] = None) -> Dict[str, object]:
    check_viewer(game_id, viewer)
    return respond(service.start_game(game_id), viewer)


@app.post("/games/{game_id}/bid")
def place_bid(game_id: str, request: BidRequest) -> Dict[str, object]:
    return respond(service.place_bid(game_id, request.seat, request.bid), request.seat)


@app.post("/games/{game_id}/play")
def play_card(game_id: str, request: PlayRequest) -> Dict[str, object]:
    try:
        transition = service.play_card(
            game_id,
            request.seat,
            request.card,
            called_whoopie=request.called_whoopie,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return respond(transition, request.seat)


@app.post("/games/{game_id}/continue")
def continue_game(game_id: str, viewer: Optional[int] = None) -> Dict[str, object]:
    check_viewer(game_id, viewer)
    return respond(service.continue_game(game_id), viewer)


@app.post("/games/{game_id}/remove")
def remove_player(game_id: str, request: RemoveRequest) -> Dict[str, object]:
    if request.mode == "leave":
        transition = service.leave_game(game_id, request.player_id)
    elif request.mode == "replace":
        transition = service.replace_with_ai(game_id, request.player_id)
    else:
        transition = service.remove_player_and_redeal(game_id, request.player_id)
    return respond(transition)


@app.post("/games/{game_id}/end")
def end_game(game_id: str) -> Dict[str, object]:
    return respond(service.end_game(game_id))


@app.get("/games/{game_id}/view/{seat}")
def get_view(game_id: str, seat: int) -> Dict[str, object]:
    return player_view_to_dict(service.get_player_view(game_id, seat))

