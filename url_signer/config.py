import functools
import hashlib

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SignerSettings(BaseModel):
    """Settings for building a UrlSigner."""

    key: str = ""
    expires_parameter: str = "expires"
    signature_parameter: str = "signature"
    algorithm: str = "sha256"
    default_ttl: int = 3600  # Seconds a link stays valid when no expiration is given

    @field_validator("expires_parameter", "signature_parameter")
    @classmethod
    def validate_parameter_name(cls, v: str, info) -> str:
        """Ensure query parameter names are usable."""
        if not v or any(c in v for c in "&=#?"):
            raise ValueError(f"{info.field_name} is not a valid query parameter name: {v!r}")
        return v

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        """Ensure the hash algorithm is provided by hashlib."""
        if v not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm: {v}")
        return v

    @field_validator("default_ttl")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        """Ensure the default TTL is a positive integer."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer, got {v}")
        return v


class ServerSettings(BaseModel):
    """Settings for the verification server."""

    host: str = "127.0.0.1"
    port: int = 8080
    original_url_header: str = "X-Original-URL"

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"port must be between 1 and 65535, got {v}")
        return v


class SettingsGroups(BaseModel):
    """Grouped, validated view of the flat environment settings."""

    signer: SignerSettings = Field(default_factory=SignerSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


class Config(BaseSettings):
    """
    Application configuration loaded from multiple sources.

    Priority (highest to lowest):
    1. Init arguments
    2. Environment variables
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Signing
    URL_SIGNER_KEY: str = ""
    URL_SIGNER_EXPIRES_PARAMETER: str = "expires"
    URL_SIGNER_SIGNATURE_PARAMETER: str = "signature"
    URL_SIGNER_ALGORITHM: str = "sha256"
    URL_SIGNER_DEFAULT_TTL: int = 3600

    # Verification server
    SERVER_HOST: str = "127.0.0.1"
    SERVER_PORT: int = 8080
    ORIGINAL_URL_HEADER: str = "X-Original-URL"

    @functools.cached_property
    def settings(self) -> SettingsGroups:
        """Build validated settings groups from environment variables."""
        return SettingsGroups(
            signer=SignerSettings(
                key=self.URL_SIGNER_KEY,
                expires_parameter=self.URL_SIGNER_EXPIRES_PARAMETER,
                signature_parameter=self.URL_SIGNER_SIGNATURE_PARAMETER,
                algorithm=self.URL_SIGNER_ALGORITHM,
                default_ttl=self.URL_SIGNER_DEFAULT_TTL,
            ),
            server=ServerSettings(
                host=self.SERVER_HOST,
                port=self.SERVER_PORT,
                original_url_header=self.ORIGINAL_URL_HEADER,
            ),
        )

    def validate_required(self) -> list[str]:
        """Validate required configuration."""
        errors = []
        if not self.URL_SIGNER_KEY:
            errors.append("URL_SIGNER_KEY is required")
        if self.URL_SIGNER_EXPIRES_PARAMETER == self.URL_SIGNER_SIGNATURE_PARAMETER:
            errors.append(
                "URL_SIGNER_EXPIRES_PARAMETER and URL_SIGNER_SIGNATURE_PARAMETER must differ"
            )
        return errors


config = Config()
