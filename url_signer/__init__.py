"""Time-limited, tamper-evident signed URLs."""

from url_signer.exceptions import (
    ExpirationError,
    InvalidExpiration,
    InvalidSignatureKey,
    UrlSignerError,
)
from url_signer.signatures import HmacSignature, Md5Signature, Sha256Signature, SignatureStrategy
from url_signer.signer import UrlSigner

__all__ = [
    "UrlSigner",
    "SignatureStrategy",
    "HmacSignature",
    "Sha256Signature",
    "Md5Signature",
    "UrlSignerError",
    "InvalidSignatureKey",
    "InvalidExpiration",
    "ExpirationError",
]
