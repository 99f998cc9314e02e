"""Errors raised by the game services.

Every ``CommandRejected`` subclass describes a client command that is
dropped without telling the client. The state machine catches them at the
dispatch boundary and only logs them.
"""


class GameError(Exception):
    """Base class for all game errors."""


class CatalogError(GameError):
    """The round catalog could not be loaded."""


class CommandRejected(GameError):
    """A client command that is silently ignored."""


class InvalidCommandForPhase(CommandRejected):
    pass


class UnauthorizedAdminCommand(CommandRejected):
    pass


class UnknownSession(CommandRejected):
    pass


class InvalidChoice(CommandRejected):
    pass


class DuplicateVote(CommandRejected):
    pass


class RoundDataMissing(CommandRejected):
    pass
