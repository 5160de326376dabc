"""Domain errors raised by the resource layer and mapped to HTTP statuses in app.main."""


class ComicLibraryError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ComicLibraryError):
    """Missing or malformed required input."""

    status_code = 400


class NotFoundError(ComicLibraryError):
    """No row matches the requested key."""

    status_code = 404
