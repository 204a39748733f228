class DailyPivotError(Exception):
    """Base class for failures shown to the user as a short message."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = str(message)
        self.status_code = status_code


class AuthError(DailyPivotError):
    pass


class StoreError(DailyPivotError):
    pass


class EntryValidationError(DailyPivotError):
    def __init__(self, message, missing_fields=()):
        super().__init__(message)
        self.missing_fields = tuple(missing_fields)
