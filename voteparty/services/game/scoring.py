from typing import Dict, Iterable, List, Optional, Tuple

from voteparty.models import LEGACY_CHOICE_ALIASES, LeaderboardEntry, Player


def canonical_answer(raw_answer) -> str:
    """Upper-case the catalog answer and fold legacy labels ("HUMAN" -> "REAL")."""
    answer = str(raw_answer or '').strip().upper()
    return LEGACY_CHOICE_ALIASES.get(answer, answer)


class ScoreEngine:
    def __init__(self, points_per_correct: int = 100):
        self.points_per_correct = points_per_correct

    def score_round(self, players: Iterable[Player], raw_answer) -> Tuple[str, Dict[str, Tuple[int, bool]]]:
        """Work out the outcome of a round without touching the players.

        Returns the canonical answer and ``{session_id: (new_score, correct)}``.
        A player who never voted is scored as wrong.
        """
        answer = canonical_answer(raw_answer)
        outcome = {}
        for player in players:
            vote = str(player.vote or '').upper()
            correct = bool(vote) and vote == answer
            new_score = player.score + (self.points_per_correct if correct else 0)
            outcome[player.session_id] = (new_score, correct)
        return answer, outcome

    @staticmethod
    def leaderboard(players: Iterable[Player], limit: int,
                    scores: Optional[Dict[str, int]] = None) -> Tuple[LeaderboardEntry, ...]:
        """Top ``limit`` players by score; ``scores`` overrides the stored ones."""
        def score_of(player):
            return scores[player.session_id] if scores is not None else player.score

        # sorted() is stable: equal scores keep registration order
        ranked: List[Player] = sorted(players, key=score_of, reverse=True)
        return tuple(LeaderboardEntry(name=p.name, score=score_of(p)) for p in ranked[:limit])
