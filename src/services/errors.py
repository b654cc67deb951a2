class ServiceError(Exception):
    """Base error whose message is safe to show on the dashboard."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    pass


class AuthError(ServiceError):
    pass


class DuplicateError(ServiceError):
    pass


class StorageError(ServiceError):
    pass
