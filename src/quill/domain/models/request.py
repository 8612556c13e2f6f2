"""Request domain models"""

from dataclasses import dataclass

HTTP_METHODS: frozenset[str] = frozenset(
    {"GET", "POST", "PUT", "PATCH", "DELETE"}
)

# Verbs whose body is read and signed; every other verb signs an empty body
PAYLOAD_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH"})


def carries_payload(method: str) -> bool:
    """Return True when the verb semantically carries a request body"""
    return method.upper() in PAYLOAD_METHODS


@dataclass(frozen=True)
class RequestDefinition:
    """Method, URI and body of a stored request

    Attributes:
        method: HTTP verb, upper case
        uri: Full URI exactly as it will be sent and signed
        body: Raw body bytes, empty for verbs without a payload
    """

    method: str
    uri: str
    body: bytes = b""


@dataclass(frozen=True)
class SignedRequest:
    """A request whose signature has been computed

    Built once per invocation and consumed by exactly one transport call.

    Attributes:
        method: HTTP verb ("GET" for the WebSocket handshake)
        uri: URI covered by the signature
        body: Body bytes covered by the signature
        api_key: Value of the API key header
        token: Replay token covered by the signature
        signature: Unpadded URL-safe base64 RSA signature
        token_header: Header name carrying the token (x-nonce or x-timestamp)
    """

    method: str
    uri: str
    body: bytes
    api_key: str
    token: str
    signature: str
    token_header: str = "x-nonce"

    @property
    def headers(self) -> dict[str, str]:
        """Authentication headers attached to the request or handshake"""
        return {
            "x-api-key": self.api_key,
            "x-sign": self.signature,
            self.token_header: self.token,
        }
