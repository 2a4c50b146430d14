"""
Domain errors raised by services and controllers.

Every error carries the ``errcode`` that ends up in the response envelope,
so the controller boundary can turn any of them into
``{"data": None, "errcode": ..., "errmsg": ...}`` without a lookup table.
"""


class ApiError(Exception):
    """Base class for errors that are reported through the response envelope"""

    errcode: int = 400

    def __init__(self, errmsg: str, errcode: int = None):
        super().__init__(errmsg)
        self.errmsg = errmsg
        if errcode is not None:
            self.errcode = errcode

    def __str__(self) -> str:
        return self.errmsg


class ValidationError(ApiError):
    """A required field is missing or empty"""

    errcode = 400


class AuthError(ApiError):
    """Caller lacks the required global or group-scoped role"""

    errcode = 401


class ConflictError(ApiError):
    """Entity with the same unique name already exists"""

    errcode = 401


class NotFoundError(ApiError):
    """Referenced group, member or user does not exist"""

    errcode = 400


class PersistenceError(ApiError):
    """Underlying store call failed; errmsg is the store's message"""

    errcode = 402
