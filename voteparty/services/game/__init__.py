"""Game domain services: sessions, votes, scoring, host auth and the round timer.

Everything here is transport-agnostic; socket handlers and HTTP routes
reach it through ``GameStateMachine``.
"""
from .state_machine import GameStateMachine

__all__ = ['GameStateMachine']
