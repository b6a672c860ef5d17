class ServiceError(Exception):
    """Base class for failures reported by the service layer."""


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class GameError(ServiceError):
    """A game rejected a join or leave request."""


class InvalidMoveError(GameError):
    pass
