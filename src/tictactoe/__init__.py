"""Tic-tac-toe package exposing the game engine, controller, and web application."""

from .ai import RandomAI
from .controller import GameController
from .game import GameSession
from .ui import app

__all__ = ["GameController", "GameSession", "RandomAI", "app"]
