class CoordinatorError(Exception):
    """Base class for rejections surfaced to the requesting connection."""

    message = 'Request rejected'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidName(CoordinatorError):
    message = 'Invalid username'


class NameTaken(CoordinatorError):
    message = 'Username already taken'


class InsufficientPlayers(CoordinatorError):
    message = 'Need at least 2 players for tournament'
