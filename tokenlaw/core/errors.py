"""Exception hierarchy for policy validation and rebalancer operations.

Every error aborts the operation that raised it; nothing is written to
storage on a failing path.
"""

from enum import Enum


class TokenLawError(Exception):
    """Base class for all tokenlaw errors."""


class ValidationErrorCode(Enum):
    """Reasons an allocation policy can be rejected."""
    NON_POSITIVE_SUPPLY = "NonPositiveSupply"
    BURN_CAP_EXCEEDS_SUPPLY = "BurnCapExceedsSupply"
    NON_POSITIVE_DURATION = "NonPositiveDuration"
    EMPTY_RECIPIENTS = "EmptyRecipients"
    DUPLICATE_RECIPIENT = "DuplicateRecipient"
    NON_POSITIVE_AMOUNT = "NonPositiveAmount"
    CLIFF_EXCEEDS_DURATION = "CliffExceedsDuration"
    RESERVED_OVERFLOW = "ReservedOverflow"
    PERCENTAGE_SUM_EXCEEDED = "PercentageSumExceeded"
    ALLOCATION_EXCEEDS_SUPPLY = "AllocationExceedsSupply"


class ValidationError(TokenLawError):
    """Allocation policy violates a structural or conservation invariant."""

    def __init__(self, code: ValidationErrorCode, message: str):
        super().__init__(f"{code.value}: {message}")
        self.code = code
        self.message = message


class PolicyFormatError(TokenLawError, ValueError):
    """Policy document could not be parsed into an AllocationPolicy."""


class ConfigError(TokenLawError, ValueError):
    """Inflation rebalancer configuration is inconsistent or out of range."""


class AuthorizationError(TokenLawError):
    """Caller is not allowed to perform the operation."""


class StateError(TokenLawError):
    """Operation is not valid in the current persisted state."""


class NotInitializedError(StateError):
    """Rebalancer config/state records are missing."""

    def __init__(self, namespace: str):
        super().__init__(f"rebalancer not initialized: {namespace}")
        self.namespace = namespace


class CooldownActiveError(TokenLawError):
    """Rebalance attempted before the cooldown elapsed."""

    def __init__(self, elapsed_seconds: int, cooldown_seconds: int):
        super().__init__(
            f"rebalance cooldown active: {elapsed_seconds}s elapsed of {cooldown_seconds}s"
        )
        self.elapsed_seconds = elapsed_seconds
        self.cooldown_seconds = cooldown_seconds


class ArithmeticOverflow(TokenLawError, ArithmeticError):
    """Result does not fit its declared integer width."""


class InputRangeError(TokenLawError, ValueError):
    """Operation argument does not fit its declared integer width."""


class SymbolUsedError(TokenLawError):
    """Symbol is already registered to an account."""

    def __init__(self, symbol: str):
        super().__init__(f"SYMBOL_USED: {symbol}")
        self.symbol = symbol
