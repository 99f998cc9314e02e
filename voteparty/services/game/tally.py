from typing import Callable, Dict

from voteparty.errors import DuplicateVote, InvalidChoice
from voteparty.models import CHOICES, Player, empty_tally


def normalize_choice(value) -> str:
    choice = str(value or '').strip().upper()
    if choice not in CHOICES:
        raise InvalidChoice(f'invalid choice {value!r}')
    return choice


class VoteTally:
    """Per-round vote counters with a one-vote-per-player guard.

    Counts only ever go up within a round. ``reset`` is the only way back
    to zero.
    """

    def __init__(self, clock: Callable[[], float], debounce_ms: int = 500):
        self._clock = clock
        self.debounce_sec = max(0, debounce_ms) / 1000.0
        self.counts: Dict[str, int] = empty_tally()

    def reset(self) -> None:
        self.counts = empty_tally()

    def record(self, player: Player, raw_choice) -> str:
        """Validate and count ``player``'s vote, locking them for the round."""
        if player.vote is not None:
            raise DuplicateVote(f'{player.session_id} already voted {player.vote}')
        choice = normalize_choice(raw_choice)
        now = self._clock()
        if self.debounce_sec and player.last_vote_at is not None and now - player.last_vote_at < self.debounce_sec:
            raise DuplicateVote(f'{player.session_id} voted again within debounce window')
        player.vote = choice
        player.last_vote_at = now
        self.counts[choice] += 1
        return choice

    def snapshot(self) -> Dict[str, int]:
        return dict(self.counts)
