from typing import Set

from voteparty.errors import UnauthorizedAdminCommand


class HostAuthority:
    """Tracks which connections proved knowledge of the host secret."""

    def __init__(self, password_hash, hasher):
        # hasher is a flask_bcrypt.Bcrypt instance
        self._password_hash = password_hash
        self._hasher = hasher
        self._authorized: Set[str] = set()

    def verify(self, password) -> bool:
        """bcrypt check only; touches no shared state."""
        if not isinstance(password, str) or not password:
            return False
        return self._hasher.check_password_hash(self._password_hash, password)

    def grant(self, sid: str) -> None:
        self._authorized.add(sid)

    def is_authorized(self, sid: str) -> bool:
        return sid in self._authorized

    def require(self, sid: str) -> None:
        if sid not in self._authorized:
            raise UnauthorizedAdminCommand(f'connection {sid} is not a logged-in host')

    def revoke(self, sid: str) -> None:
        self._authorized.discard(sid)
