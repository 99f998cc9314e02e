"""Typed commands fed to ``GameStateMachine.dispatch``.

Socket handlers and the round timer never touch game state directly; they
build one of these and hand it over.
"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Command:
    sid: Optional[str] = None


@dataclass(frozen=True)
class Join(Command):
    name: Any = None
    session_id: Any = None


@dataclass(frozen=True)
class SubmitVote(Command):
    choice: Any = None
    session_id: Any = None


@dataclass(frozen=True)
class RequestState(Command):
    pass


@dataclass(frozen=True)
class HostLogin(Command):
    password: Any = None
    # Filled in by dispatch before the game lock is taken
    verified: bool = False


@dataclass(frozen=True)
class Disconnect(Command):
    pass


@dataclass(frozen=True)
class TimerTick(Command):
    generation: int = -1


@dataclass(frozen=True)
class AdminCommand(Command):
    """Only honoured from a connection that passed ``HostLogin``."""


@dataclass(frozen=True)
class StartRound(AdminCommand):
    pass


@dataclass(frozen=True)
class ShowLeaderboard(AdminCommand):
    pass


@dataclass(frozen=True)
class NextRound(AdminCommand):
    pass


@dataclass(frozen=True)
class HardReset(AdminCommand):
    pass
