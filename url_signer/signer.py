"""Signing and validation of time-limited URLs."""

import hmac
import time
import warnings
from datetime import datetime
from typing import Callable, Optional, Union

from loguru import logger

from url_signer.config import SignerSettings, config
from url_signer.exceptions import InvalidExpiration, InvalidSignatureKey
from url_signer.signatures import HmacSignature, SignatureStrategy
from url_signer.utils.url import add_query_parameters, query_parameters, without_parameters

# Seconds from now, or an absolute point in time
Expiration = Union[int, datetime]


class UrlSigner:
    """Signs URLs with an expiration and validates them later.

    A signed URL carries two extra query parameters: the Unix timestamp after
    which it is no longer valid and a signature computed over the rest of the
    URL plus that timestamp. Nothing is stored; validity is derived from the
    URL and the key alone.

    Example
    -------
    >>> signer = UrlSigner("secret")
    >>> url = signer.sign("https://example.com/file?id=42", 3600)
    >>> signer.validate(url)
    True
    """

    def __init__(
        self,
        default_key: str,
        expires_parameter_name: str = "expires",
        signature_parameter_name: str = "signature",
        signature: Optional[SignatureStrategy] = None,
        clock: Optional[Callable[[], float]] = None,
        default_ttl: Optional[int] = None,
    ):
        """Create a signer.

        Parameters
        ----------
        default_key : str
            Key used when ``sign``/``validate`` are not given one.
        expires_parameter_name : str
            Query parameter carrying the expiration timestamp.
        signature_parameter_name : str
            Query parameter carrying the signature.
        signature : Optional[SignatureStrategy]
            How signatures are computed. Defaults to HMAC-SHA256.
        clock : Optional[Callable[[], float]]
            Returns the current Unix time. Defaults to ``time.time``.
        default_ttl : Optional[int]
            Seconds a link stays valid when ``sign`` gets no expiration.

        Raises
        ------
        InvalidSignatureKey
            If ``default_key`` is empty.
        ValueError
            If a parameter name is empty or both names are the same.
        """
        if default_key == "":
            raise InvalidSignatureKey.signature_empty()
        if not expires_parameter_name or not signature_parameter_name:
            raise ValueError("Query parameter names must not be empty")
        if expires_parameter_name == signature_parameter_name:
            raise ValueError(
                f"Expiration and signature parameters must differ, both are {expires_parameter_name!r}"
            )

        self._default_key = default_key
        self._expires_parameter_name = expires_parameter_name
        self._signature_parameter_name = signature_parameter_name
        self._signature = signature or HmacSignature()
        self._clock = clock or time.time
        self._default_ttl = default_ttl

    @classmethod
    def from_config(cls, settings: Optional[SignerSettings] = None, **kwargs) -> "UrlSigner":
        """Build a signer from application settings.

        Extra keyword arguments (``clock``, ``signature``) are passed through.
        """
        if settings is None:
            settings = config.settings.signer
        kwargs.setdefault("signature", HmacSignature(settings.algorithm))
        return cls(
            settings.key,
            expires_parameter_name=settings.expires_parameter,
            signature_parameter_name=settings.signature_parameter,
            default_ttl=settings.default_ttl,
            **kwargs,
        )

    @property
    def expires_parameter_name(self) -> str:
        return self._expires_parameter_name

    @property
    def signature_parameter_name(self) -> str:
        return self._signature_parameter_name

    @property
    def signature(self) -> SignatureStrategy:
        return self._signature

    def sign(
        self,
        url: str,
        expiration: Optional[Expiration] = None,
        key: Optional[str] = None,
    ) -> str:
        """Sign a URL so it stays valid until the given expiration.

        Parameters
        ----------
        url : str
            The URL to sign. Existing expiration and signature parameters are
            replaced.
        expiration : Optional[Expiration]
            Seconds from now as an ``int``, or an absolute ``datetime``.
            Falls back to the signer's default TTL when omitted.
        key : Optional[str]
            Signing key for this call only. Defaults to the signer's key.

        Returns
        -------
        str
            The URL with expiration and signature parameters appended.

        Raises
        ------
        InvalidExpiration
            If the expiration has the wrong type or is not in the future.
        """
        if key is None:
            key = self._default_key
        if expiration is None:
            expiration = self._default_ttl

        timestamp = str(self._expiration_timestamp(expiration))
        intended_url = self._intended_url(url)
        signature = self._signature.create_signature(intended_url, timestamp, key)

        logger.debug(f"Signed URL valid until {timestamp}")
        return add_query_parameters(
            intended_url,
            {
                self._expires_parameter_name: timestamp,
                self._signature_parameter_name: signature,
            },
        )

    def sign_with_datetime(
        self,
        url: str,
        expiration: Expiration,
        key: Optional[str] = None,
    ) -> str:
        """Deprecated alias of :meth:`sign`."""
        warnings.warn(
            "sign_with_datetime() is deprecated, use sign() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.sign(url, expiration, key)

    def validate(self, url: str, key: Optional[str] = None) -> bool:
        """Check that a URL carries a valid, unexpired signature.

        Never raises for malformed input; every failure is reported as False
        without saying why.

        Parameters
        ----------
        url : str
            The URL as presented by the client.
        key : Optional[str]
            Key to validate with. Defaults to the signer's key.

        Returns
        -------
        bool
            True if the signature matches and the link has not expired.
        """
        if key is None:
            key = self._default_key

        try:
            params = query_parameters(url)
            if self._is_missing_a_query_parameter(params):
                logger.debug("Rejected URL: missing expiration or signature")
                return False

            expiration = params[self._expires_parameter_name]
            if not self._is_future(int(expiration)):
                logger.debug(f"Rejected URL: expired at {expiration}")
                return False

            if not self._has_valid_signature(url, expiration, params[self._signature_parameter_name], key):
                logger.debug("Rejected URL: signature mismatch")
                return False
        except ValueError as e:
            # Includes UnicodeError and malformed integers
            logger.debug(f"Rejected URL: could not be parsed ({type(e).__name__})")
            return False

        return True

    def _now(self) -> int:
        return int(self._clock())

    def _is_future(self, timestamp: int) -> bool:
        # The current second still counts as valid
        return timestamp >= self._now()

    def _is_missing_a_query_parameter(self, params: dict[str, str]) -> bool:
        return (
            self._expires_parameter_name not in params
            or self._signature_parameter_name not in params
        )

    def _expiration_timestamp(self, expiration: Expiration) -> int:
        # bool is an int subclass but never a meaningful offset
        if isinstance(expiration, bool):
            raise InvalidExpiration.wrong_type()

        if isinstance(expiration, int):
            timestamp = self._now() + expiration
        elif isinstance(expiration, datetime):
            timestamp = int(expiration.timestamp())
        else:
            raise InvalidExpiration.wrong_type()

        if timestamp <= self._now():
            raise InvalidExpiration.is_in_past()

        return timestamp

    def _intended_url(self, url: str) -> str:
        return without_parameters(
            url,
            [self._expires_parameter_name, self._signature_parameter_name],
        )

    def _has_valid_signature(self, url: str, expiration: str, provided: str, key: str) -> bool:
        expected = self._signature.create_signature(self._intended_url(url), expiration, key)
        return hmac.compare_digest(expected.encode(), provided.encode())
