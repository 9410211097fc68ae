from enum import Enum


class ErrorKind(Enum):
    external = "external"
    no_eligible_recipe = "no_eligible_recipe"
    degraded_fetch = "degraded_fetch"


class PickerError(Exception):
    """Base error. The underlying failure, if any, is kept as ``cause``."""

    kind: ErrorKind

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class ExternalCallError(PickerError):
    kind = ErrorKind.external


class NoEligibleRecipe(PickerError):
    kind = ErrorKind.no_eligible_recipe


class DegradedFetch(PickerError):
    """A paginated read that stopped early. ``partial`` holds what was read."""

    kind = ErrorKind.degraded_fetch

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        *,
        partial: list | None = None,
    ) -> None:
        super().__init__(message, cause)
        self.partial = [] if partial is None else partial
