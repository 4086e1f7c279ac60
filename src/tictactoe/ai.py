"""Random-move opponent for tic-tac-toe."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from .game import Board, InvalidStateError, Player, empty_cells


def ai_select_move(board: Board, rng: Optional[random.Random] = None) -> int:
    """Pick uniformly among the empty cells of ``board``."""

    moves = empty_cells(board)
    if not moves:
        raise InvalidStateError("No valid moves available")
    return (rng or random).choice(moves)


@dataclass
class RandomAI:
    """AI player bound to a symbol and its own random source.

    Seeding ``rng`` makes a whole game reproducible.
    """

    player: Player
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def choose(self, board: Board) -> int:
        return ai_select_move(board, self.rng)
