"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Request validation

Every error is rendered as {"error": <message>}; the numeric code is kept
for logs and tests.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 400,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth ---

class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Unauthorized", 401)


# --- 2xxx: Request validation ---

class InvalidDateError(AppError):
    def __init__(self, field: str, value: object) -> None:
        super().__init__(
            2001,
            f"Invalid {field}: expected a YYYY-MM-DD calendar date, got {value!r}",
            400,
        )


