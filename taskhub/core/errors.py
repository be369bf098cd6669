# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Domain exceptions raised by services and mapped to HTTP codes by controllers."""


class ServiceError(Exception):
    def __init__(self, message: str):
        self.message = message
        super(ServiceError, self).__init__(message)


class BadRequestError(ServiceError):
    pass


class AuthError(ServiceError):
    pass


class ForbiddenError(ServiceError):
    pass


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class InvalidObjectIdError(BadRequestError):
    def __init__(self, value):
        self.value = value
        super(InvalidObjectIdError, self).__init__(f"Invalid id format: {value}")
