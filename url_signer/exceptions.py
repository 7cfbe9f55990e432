"""Errors raised while constructing a signer or signing a URL."""

from enum import Enum


class UrlSignerError(Exception):
    """Base class for URL signer errors."""

    pass


class InvalidSignatureKey(UrlSignerError):
    """Raised when a signer is created without a usable key."""

    @classmethod
    def signature_empty(cls) -> "InvalidSignatureKey":
        return cls("The signature key is empty")


class ExpirationError(Enum):
    """Why an expiration was rejected."""

    WRONG_TYPE = "wrong_type"
    IN_PAST = "in_past"


class InvalidExpiration(UrlSignerError):
    """Raised when a URL cannot be signed with the given expiration."""

    def __init__(self, reason: ExpirationError, message: str):
        self.reason = reason
        super().__init__(message)

    @classmethod
    def wrong_type(cls) -> "InvalidExpiration":
        return cls(
            ExpirationError.WRONG_TYPE,
            "Expiration date must be an instance of datetime or an integer",
        )

    @classmethod
    def is_in_past(cls) -> "InvalidExpiration":
        return cls(ExpirationError.IN_PAST, "Expiration date must be in the future")
