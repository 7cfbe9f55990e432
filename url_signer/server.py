"""FastAPI server that checks signed URLs for a reverse proxy or an app."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from loguru import logger

from url_signer.config import config
from url_signer.signer import UrlSigner

# Global signer instance
_signer: Optional[UrlSigner] = None


def get_signer() -> UrlSigner:
    """Get the global signer instance.

    Returns
    -------
    UrlSigner
        The signer.

    Raises
    ------
    RuntimeError
        If the signer is not initialized.
    """
    if _signer is None:
        raise RuntimeError("UrlSigner not initialized")
    return _signer


class SignedUrlGuard:
    """FastAPI dependency rejecting requests whose URL is not validly signed.

    Parameters
    ----------
    header : Optional[str]
        When set and present on the request, the URL to check is read from
        this header instead of the request itself. Reverse proxies use it to
        forward the URL the client asked for.
    """

    def __init__(self, header: Optional[str] = None):
        self.header = header

    def __call__(self, request: Request, signer: UrlSigner = Depends(get_signer)) -> str:
        url = str(request.url)
        if self.header and self.header in request.headers:
            url = request.headers[self.header]

        if not signer.validate(url):
            raise HTTPException(status_code=403, detail="Invalid or expired link")
        return url


def create_app(signer: Optional[UrlSigner] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    signer : Optional[UrlSigner]
        Signer to validate with. Built from configuration when omitted.

    Returns
    -------
    FastAPI
        The configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        global _signer
        _signer = signer or UrlSigner.from_config()
        logger.info(f"Signed URL server started on port {config.settings.server.port}")
        yield
        _signer = None
        logger.info("Signed URL server stopped")

    app = FastAPI(
        title="URL Signer",
        description="Validates time-limited signed URLs",
        lifespan=lifespan,
    )

    verify_url = SignedUrlGuard(header=config.settings.server.original_url_header)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/verify")
    async def verify(url: str = Depends(verify_url)):
        """Answer 200 for a validly signed URL and 403 otherwise."""
        return {"status": "ok"}

    return app


async def run_server():
    """Run the signed URL server."""
    import uvicorn

    errors = config.validate_required()
    if errors:
        raise RuntimeError("Invalid configuration: " + "; ".join(errors))

    app = create_app()
    server_config = uvicorn.Config(
        app,
        host=config.settings.server.host,
        port=config.settings.server.port,
        log_level="info",
    )
    server = uvicorn.Server(server_config)
    await server.serve()
