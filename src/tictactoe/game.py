"""Core rules for classic 3x3 tic-tac-toe."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

Player = str  # "X" or "O"
Board = List[str]

EMPTY = ""
SYMBOLS: Tuple[Player, ...] = ("X", "O")
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class InvalidStateError(RuntimeError):
    """Raised when the engine is driven into a state it should never reach."""


class Mode(str, Enum):
    FRIEND = "friend"
    AI = "ai"


class Status(str, Enum):
    ONGOING = "ongoing"
    WIN = "win"
    TIE = "tie"


@dataclass(frozen=True)
class Outcome:
    status: Status
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def terminal(self) -> bool:
        return self.status is not Status.ONGOING


ONGOING = Outcome(Status.ONGOING)
TIE = Outcome(Status.TIE)


def opponent(player: Player) -> Player:
    if player == "X":
        return "O"
    if player == "O":
        return "X"
    raise ValueError(f"Unknown symbol {player!r}")


def new_board() -> Board:
    return [EMPTY] * BOARD_SIZE


def empty_cells(board: Board) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


# ---------- Session ----------


@dataclass
class GameSession:
    """State of one playthrough, from start to a terminal outcome."""

    mode: Mode
    player_symbol: Player
    ai_symbol: Player
    current_turn: Player
    board: Board = field(default_factory=new_board)
    active: bool = True
    outcome: Outcome = ONGOING
    move_log: List[Dict[str, object]] = field(default_factory=list)
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def is_ai_turn(self) -> bool:
        return self.mode is Mode.AI and self.current_turn == self.ai_symbol


@dataclass(frozen=True)
class MoveResult:
    accepted: bool
    index: int
    symbol: Optional[Player] = None
    outcome: Outcome = ONGOING
    ai_due: bool = False


# ---------- Engine ----------


def start(mode: Mode, player_symbol: Player) -> GameSession:
    """Create a fresh session where ``player_symbol`` moves first."""

    mode = Mode(mode)
    return GameSession(
        mode=mode,
        player_symbol=player_symbol,
        ai_symbol=opponent(player_symbol),
        current_turn=player_symbol,
    )


def can_accept(
    session: GameSession, index: int, symbol: Optional[Player] = None
) -> bool:
    if not session.active:
        return False
    if not 0 <= index < BOARD_SIZE:
        return False
    if session.board[index] != EMPTY:
        return False
    if symbol is not None and symbol != session.current_turn:
        return False
    return True


def evaluate_termination(board: Board) -> Outcome:
    """Scan the winning lines in order, then check for a full board.

    The first fully owned line decides the winner, so a move closing two
    lines at once reports the earlier one.
    """

    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return Outcome(Status.WIN, winner=v, line=(a, b, c))
    if EMPTY not in board:
        return TIE
    return ONGOING


def advance_turn(session: GameSession, outcome: Outcome, mover: Player) -> bool:
    """Hand the turn over after ``mover`` played.

    Returns True when the AI now owes a move.
    """

    session.outcome = outcome
    if outcome.terminal:
        session.active = False
        return False

    if session.mode is Mode.AI:
        if mover == session.player_symbol:
            session.current_turn = session.ai_symbol
            return True
        session.current_turn = session.player_symbol
        return False

    session.current_turn = opponent(mover)
    return False


def apply_move(
    session: GameSession, index: int, symbol: Optional[Player] = None
) -> MoveResult:
    """Write the current turn's symbol at ``index``.

    Moves that fail :func:`can_accept` are ignored and leave the session
    untouched.
    """

    if not can_accept(session, index, symbol):
        return MoveResult(accepted=False, index=index, outcome=session.outcome)

    mover = session.current_turn
    session.board[index] = mover
    session.move_log.append({"player": mover, "cellIndex": index})

    outcome = evaluate_termination(session.board)
    ai_due = advance_turn(session, outcome, mover)
    return MoveResult(
        accepted=True, index=index, symbol=mover, outcome=outcome, ai_due=ai_due
    )


def status_text(outcome: Outcome) -> str:
    if outcome.status is Status.WIN:
        return f"{outcome.winner} wins!"
    if outcome.status is Status.TIE:
        return "It's a tie!"
    return ""
