"""Pytest fixtures for quill tests"""

import io
import sys
from pathlib import Path

import pytest
from Crypto.PublicKey import RSA
from rich.console import Console

# =============================================================================
# Global Test Setup
# =============================================================================

# Add src to Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quill.core.config import Config  # noqa: E402
from quill.infrastructure.api.auth import RequestSigner  # noqa: E402


@pytest.fixture(scope="session")
def rsa_key():
    """Test-only RSA key generated once per session

    Session scope: key generation is slow and the key is immutable.
    """
    return RSA.generate(2048)


@pytest.fixture(scope="session")
def other_rsa_key():
    """A second key, for signatures that must not verify"""
    return RSA.generate(2048)


@pytest.fixture(scope="session")
def private_pem(rsa_key) -> bytes:
    """PKCS#1 PEM encoding of the test key"""
    return rsa_key.export_key(format="PEM", pkcs=1)


@pytest.fixture
def signer(rsa_key) -> RequestSigner:
    """Signer bound to the test key"""
    return RequestSigner(rsa_key)


@pytest.fixture
def pem_file(tmp_path, private_pem) -> Path:
    """Private key written to a temp file"""
    path = tmp_path / "private.pem"
    path.write_bytes(private_pem)
    return path


@pytest.fixture
def api_key_file(tmp_path) -> Path:
    """API key file with a trailing newline"""
    path = tmp_path / "apikey"
    path.write_bytes(b"test-api-key\n")
    return path


@pytest.fixture
def requests_dir(tmp_path) -> Path:
    """Request definitions for a GET and a POST request"""
    root = tmp_path / "requests"

    (root / "orders").mkdir(parents=True)
    (root / "orders" / "uri").write_text("GET https://api.example/orders\n")

    (root / "create_order").mkdir(parents=True)
    (root / "create_order" / "uri").write_text(
        "POST https://api.example/orders\n"
    )
    (root / "create_order" / "body").write_bytes(b'{"qty":1}')

    return root


@pytest.fixture
def test_config(tmp_path, pem_file, api_key_file, requests_dir) -> Config:
    """Config pointing at the temp credential files"""
    return Config(
        pem_file=str(pem_file),
        api_key_file=str(api_key_file),
        nonce_file=str(tmp_path / "nonce"),
        requests_dir=str(requests_dir),
        timeout=5.0,
        close_timeout=0.2,
    )


@pytest.fixture
def console_output():
    """Rich console writing to a buffer, plus the buffer"""
    buffer = io.StringIO()
    console = Console(file=buffer, width=500, color_system=None)
    return console, buffer
