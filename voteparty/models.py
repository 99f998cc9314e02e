import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

AI = 'AI'
REAL = 'REAL'
CHOICES = (AI, REAL)
# Older catalogs labelled the human answer "HUMAN"
LEGACY_CHOICE_ALIASES = {'HUMAN': REAL}


class Phase(str, enum.Enum):
    LOBBY = 'LOBBY'
    QUESTION = 'QUESTION'
    REVEAL = 'REVEAL'
    LEADERBOARD = 'LEADERBOARD'
    GAME_OVER = 'GAME_OVER'


def empty_tally() -> Dict[str, int]:
    return {choice: 0 for choice in CHOICES}


@dataclass
class Player:
    session_id: str
    name: str
    score: int = 0
    vote: Optional[str] = None
    last_vote_at: Optional[float] = None
    # Socket.IO connection id; None while disconnected
    sid: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.sid is not None

    def to_dict(self):
        return {
            'name': self.name,
            'score': self.score,
            'connected': self.connected,
            'has_voted': self.vote is not None,
        }


@dataclass(frozen=True)
class RoundDefinition:
    ordinal: int
    media_reference: str
    correct_choice: str


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int

    def to_dict(self):
        return {'name': self.name, 'score': self.score}


@dataclass(frozen=True)
class RoundResult:
    """Snapshot published at reveal (or at game over, without answer and tally)."""
    correct_choice: Optional[str]
    tally: Optional[Dict[str, int]]
    leaderboard: Tuple[LeaderboardEntry, ...]

    def to_dict(self):
        return {
            'correct_choice': self.correct_choice,
            'tally': dict(self.tally) if self.tally is not None else None,
            'leaderboard': [entry.to_dict() for entry in self.leaderboard],
        }


@dataclass
class GameSession:
    total_rounds: int
    # VoteTally of the current round
    tally: Any
    phase: Phase = Phase.LOBBY
    round_index: int = 0
    seconds_remaining: Optional[int] = None
    result: Optional[RoundResult] = None
