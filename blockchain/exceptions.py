"""
Exceptions
Error taxonomy for confirmation tracking and contract wrapping
"""


class ConfirmationError(Exception):
    """Base exception for confirmation-related errors."""

    pass


class ConfigurationError(ConfirmationError, ValueError):
    """Raised when the deployment configuration is missing or malformed."""

    pass


class NodeQueryError(ConfirmationError):
    """Raised when the node cannot answer a query."""

    pass


class RetryableNodeError(NodeQueryError):
    """Raised for transient node failures (connection drops, timeouts, rate limits)."""

    pass


class TransactionStalledError(ConfirmationError, TimeoutError):
    """Raised when no receipt appears within the polling bound and resubmission is disabled."""

    pass


class ConfirmationDeadlineError(ConfirmationError, TimeoutError):
    """Raised when the caller's deadline expires before the transaction confirms."""

    pass


class ArtifactError(ConfirmationError, ValueError):
    """Raised when a deployment artifact is missing or unreadable."""

    pass


class ContractVariableMismatchError(ConfirmationError, AssertionError):
    """Raised when a deployed contract variable differs from the expected value."""

    pass
