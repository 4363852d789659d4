# pricewatch/errors.py

"""Exception hierarchy for pricewatch.

Recoverable failures (a fetch that timed out, a document that parsed to
nothing) travel as returned values, see ``FetchError`` and
``ParseError``. Only the unrecoverable case is raised.
"""

from typing import Any


class PricewatchError(Exception):
    """Base class for all pricewatch exceptions."""


class PriceListUnavailableError(PricewatchError):
    """A cycle failed and no snapshot has ever been obtained."""

    def __init__(self, cause: Any) -> None:
        self.cause = cause
        super().__init__(f"Price list unavailable: {cause}")
