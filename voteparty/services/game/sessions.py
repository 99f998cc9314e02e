import re
from typing import Dict, Iterator, Optional, Tuple

from voteparty.errors import UnknownSession
from voteparty.models import Player

SESSION_ID_MAX_LENGTH = 64
DEFAULT_NAME = 'Player'
_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


def normalize_session_id(value) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    # Tokens are opaque: over-long ones are refused, never truncated
    if not value or len(value) > SESSION_ID_MAX_LENGTH:
        return None
    return value


def sanitize_name(value, max_length: int = 12) -> str:
    if not isinstance(value, str):
        return DEFAULT_NAME
    cleaned = ' '.join(_CONTROL_CHARS.sub('', value).split())
    return cleaned[:max_length].strip() or DEFAULT_NAME


class SessionRegistry:
    """Players keyed by their client-held session token.

    Records outlive their connections: a disconnect only clears ``sid``,
    and the next ``join`` with the same token reattaches the record with
    its score and current vote intact. Iteration follows registration order.
    """

    def __init__(self, max_name_length: int = 12):
        self.max_name_length = max_name_length
        self._players: Dict[str, Player] = {}
        self._sid_to_session: Dict[str, str] = {}

    def join(self, session_id, name, sid: str) -> Tuple[Player, bool]:
        """Attach ``sid`` to the player for ``session_id``; returns (player, created)."""
        token = normalize_session_id(session_id)
        if token is None:
            raise UnknownSession('join without a usable session token')
        # A connection speaks for one player at a time
        previous = self._sid_to_session.get(sid)
        if previous is not None and previous != token:
            self._detach(previous)

        player = self._players.get(token)
        created = player is None
        if created:
            player = Player(session_id=token, name=sanitize_name(name, self.max_name_length))
            self._players[token] = player
        elif name:
            player.name = sanitize_name(name, self.max_name_length)

        if player.sid is not None and player.sid != sid:
            self._sid_to_session.pop(player.sid, None)
        player.sid = sid
        self._sid_to_session[sid] = token
        return player, created

    def disconnect(self, sid: str) -> Optional[Player]:
        token = self._sid_to_session.pop(sid, None)
        if token is None:
            return None
        player = self._players.get(token)
        if player is not None and player.sid == sid:
            player.sid = None
        return player

    def _detach(self, token: str) -> None:
        player = self._players.get(token)
        if player is not None:
            player.sid = None

    def get(self, session_id) -> Player:
        token = normalize_session_id(session_id)
        player = self._players.get(token) if token else None
        if player is None:
            raise UnknownSession(f'unknown session {session_id!r}')
        return player

    def by_sid(self, sid: str) -> Optional[Player]:
        token = self._sid_to_session.get(sid)
        return self._players.get(token) if token else None

    def clear_votes(self) -> None:
        for player in self._players.values():
            player.vote = None

    def clear(self) -> None:
        self._players.clear()
        self._sid_to_session.clear()

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    def __len__(self) -> int:
        return len(self._players)
