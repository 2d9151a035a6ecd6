"""Game orchestration: players, session, persistence."""

from gambit.game.interfaces import GamePhase, IGameSession, IPlayer
from gambit.game.persistence import GameStore, LoadedGame, SaveInfo
from gambit.game.player import ComputerPlayer, HumanPlayer
from gambit.game.session import GameEvents, GameSession

__all__ = [
    "ComputerPlayer",
    "GameEvents",
    "GamePhase",
    "GameSession",
    "GameStore",
    "HumanPlayer",
    "IGameSession",
    "IPlayer",
    "LoadedGame",
    "SaveInfo",
]
