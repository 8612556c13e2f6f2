"""Authenticated request building and unary HTTP transport"""

from dataclasses import dataclass

import httpx
from loguru import logger

from quill.domain.models.request import HTTP_METHODS, SignedRequest, carries_payload
from quill.shared.exceptions import ConfigurationError, TransportError
from quill.shared.log_setup import install_logging_bridge

from .auth import RequestSigner
from .replay import ReplayTokenProvider

MASKED_HEADERS = frozenset({"x-api-key", "x-sign"})


def mask_headers(headers: dict[str, str] | httpx.Headers) -> dict[str, str]:
    """Copy headers with credential values masked for logging"""
    return {
        k: ("***" if k.lower() in MASKED_HEADERS else v)
        for k, v in headers.items()
    }


class AuthenticatedRequestBuilder:
    """Assembles signed requests for unary calls and streaming handshakes

    Responsibilities:
    - Method validation and body selection
    - Replay token generation (not persistence)
    - Signature computation
    """

    def __init__(
        self,
        signer: RequestSigner,
        token_provider: ReplayTokenProvider,
        api_key: str = "",
    ) -> None:
        """Initialize the builder

        Args:
            signer: Signer bound to the private key
            token_provider: Source of replay tokens
            api_key: Value for the x-api-key header (may be empty for sign-only)
        """
        self._signer = signer
        self._token_provider = token_provider
        self._api_key = api_key

    @property
    def token_provider(self) -> ReplayTokenProvider:
        """Provider used for replay tokens"""
        return self._token_provider

    def build(
        self,
        method: str,
        uri: str,
        body: bytes = b"",
        token_override: str | None = None,
    ) -> SignedRequest:
        """Sign a unary request

        The body is dropped for verbs that carry no payload, so GET and DELETE
        always sign and send an empty body.

        Args:
            method: HTTP verb (GET, POST, PUT, PATCH, DELETE)
            uri: URI exactly as it will be sent
            body: Raw body bytes
            token_override: Explicit replay token input, see ReplayTokenProvider

        Returns:
            Immutable SignedRequest

        Raises:
            ConfigurationError: If the method is not supported
            InvalidStateError: If the persisted counter is unparseable
            SigningError: If signing fails
        """
        method = method.upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {method}")

        if not carries_payload(method):
            body = b""

        token = self._token_provider.next(token_override)
        signature = self._signer.sign(token, uri, body)

        return SignedRequest(
            method=method,
            uri=uri,
            body=body,
            api_key=self._api_key,
            token=token,
            signature=signature,
            token_header=self._token_provider.header_name,
        )

    def build_handshake(
        self, uri: str, token_override: str | None = None
    ) -> SignedRequest:
        """Sign a WebSocket upgrade request (empty body)"""
        return self.build("GET", uri, b"", token_override=token_override)


@dataclass(frozen=True)
class UnaryResponse:
    """Status and body of a unary response, surfaced verbatim"""

    status_code: int
    reason_phrase: str
    text: str

    @property
    def status_line(self) -> str:
        """Status as "<code> <reason>" """
        return f"{self.status_code} {self.reason_phrase}".strip()

    @property
    def is_success(self) -> bool:
        """True for 2xx responses"""
        return 200 <= self.status_code < 300


class SignedRequestClient:
    """One-shot HTTP transport for signed requests

    Non-2xx responses are returned, not raised, and nothing is retried.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize request client

        Args:
            timeout: Request timeout in seconds
            transport: Optional httpx transport (for testing)
        """
        self._timeout = timeout
        self._transport = transport
        install_logging_bridge()

    def _build_http_client(self) -> httpx.AsyncClient:
        """Create an AsyncClient with httpx request logging hooks."""
        return httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            event_hooks={"request": [self._log_httpx_request]},
        )

    async def _log_httpx_request(self, request: httpx.Request) -> None:
        """Log outbound httpx requests with headers (credentials masked)."""
        logger.debug(
            f"HTTPX request: {request.method} {request.url} {mask_headers(request.headers)}"
        )

    async def send(self, request: SignedRequest) -> UnaryResponse:
        """Send a signed request

        Args:
            request: Request built by AuthenticatedRequestBuilder

        Returns:
            UnaryResponse for any HTTP status

        Raises:
            TransportError: If the request cannot be built or delivered
        """
        logger.info(f"{request.method} {request.uri}")

        try:
            async with self._build_http_client() as client:
                response = await client.request(
                    request.method,
                    request.uri,
                    headers=request.headers,
                    content=request.body,
                )
        except httpx.InvalidURL as e:
            raise TransportError(f"Invalid URL {request.uri}: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to {request.uri} failed: {e}") from e

        logger.debug(
            f"HTTPX response: status={response.status_code} url={response.url} body={response.text}"
        )
        if not (200 <= response.status_code < 300):
            logger.warning(f"Non-success response: {response.status_code}")

        return UnaryResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            text=response.text,
        )
