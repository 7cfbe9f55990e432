"""Signature strategies used by the URL signer."""

import hashlib
import hmac
from abc import ABC, abstractmethod


class SignatureStrategy(ABC):
    """Turns a canonical URL, an expiration and a key into a signature.

    Implementations must be deterministic for fixed inputs and free of side
    effects so a single instance can be shared between signers and threads.
    """

    @abstractmethod
    def create_signature(self, url: str, expiration: str, key: str) -> str:
        """Create the signature for a URL.

        Parameters
        ----------
        url : str
            The URL with the expiration and signature parameters removed.
        expiration : str
            The Unix expiration timestamp as a decimal string.
        key : str
            The secret signing key.

        Returns
        -------
        str
            A signature that is safe to embed in a query string.
        """


class HmacSignature(SignatureStrategy):
    """Hex-encoded HMAC over ``"{url}::{expiration}"``."""

    def __init__(self, algorithm: str = "sha256"):
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        self.algorithm = algorithm

    def create_signature(self, url: str, expiration: str, key: str) -> str:
        payload = f"{url}::{expiration}"
        return hmac.new(key.encode(), payload.encode(), self.algorithm).hexdigest()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(algorithm={self.algorithm!r})"


class Sha256Signature(HmacSignature):
    """HMAC-SHA256, the default digest."""

    def __init__(self):
        super().__init__("sha256")


class Md5Signature(HmacSignature):
    """HMAC-MD5, kept only for links issued by older deployments."""

    def __init__(self):
        super().__init__("md5")
