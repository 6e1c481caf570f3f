"""Engine exceptions."""


class InvalidInputError(ValueError):
    """Raised when deposit inputs (dates, tenure fields) cannot be parsed.

    Fatal to the single call that raised it. Insufficient market data is
    never reported this way; valuation functions return zero results instead.
    """


class InvestmentNotFoundError(KeyError):
    """No investment with the requested id exists in the repository."""


class NAVProviderError(RuntimeError):
    """The NAV provider could not be reached or returned an unusable payload."""
