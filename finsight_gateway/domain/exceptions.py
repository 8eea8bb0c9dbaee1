"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AuthenticationError(DomainException):
    """Bearer token missing, malformed, or rejected"""

    pass


class TransactionNotFoundError(DomainException):
    """Transaction does not exist or belongs to another user"""

    pass


class GoalNotFoundError(DomainException):
    """Goal does not exist or belongs to another user"""

    pass


class InvalidContributionError(DomainException):
    """Contribution amount must be positive"""

    pass
