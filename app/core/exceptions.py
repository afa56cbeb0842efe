"""
Error taxonomy for credit accounting.

Services raise these; app.main maps them onto HTTP responses.
"""


class CreditServiceError(Exception):
    """Base class."""


class ConfigurationError(CreditServiceError):
    """Plan catalog unreadable or the free plan is missing."""


class NotFoundError(CreditServiceError):
    pass


class TransientStoreError(CreditServiceError):
    """A subscription or usage read/write failed; safe to retry."""


class CreditLimitExceeded(CreditServiceError):
    def __init__(self, check):
        self.check = check
        super().__init__(check.message or "Monthly credit limit reached")
