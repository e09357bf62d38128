from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class CreateGameRequest(BaseModel):
    player_count: int = Field(2, ge=2, le=4)
    human_count: int = Field(1, ge=1, le=4)
    names: Optional[list[str]] = None
    colors: Optional[list[str]] = None
    enable_rotation: bool = False


class SelectRequest(BaseModel):
    node: str


class MoveRequest(BaseModel):
    source: str
    dest: str


class NodePayload(BaseModel):
    name: str
    x: float
    y: float
    area: Optional[str]
    piece: Optional[int]        # owning player id, None if empty
    color: Optional[str]


class PlayerPayload(BaseModel):
    id: int
    name: str
    kind: str
    color: str
    area: str
    target: str
    score: int
    pieces: int


class MovePayload(BaseModel):
    player: int
    source: str
    dest: str
    captured: Optional[str]
    passed: bool = False


class GameStateResponse(BaseModel):
    session_id: str
    player_count: int
    nodes: list[NodePayload]
    edges: list[list[str]]
    players: list[PlayerPayload]
    current_player: int
    current_player_kind: str
    waiting_for_human: bool
    selected_node: Optional[str]
    highlighted: list[str]
    rotation_angle: float
    done: bool
    winner: Optional[int]
    win_reason: Optional[str]
    move_count: int
    last_move: Optional[MovePayload]
    computer_turns: list[MovePayload]
