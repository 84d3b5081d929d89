"""Test configuration for pushgate."""

import pytest

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
def apns_config():
    """Config pointing at a certificate that is never loaded by the fakes."""
    from pushgate.apns.config import APNSConfig

    return APNSConfig(certificate="tests/fixtures/cert.pem", sandbox=True)


@pytest.fixture
def make_tokens():
    """Build ``n`` distinct 64-character hex device tokens."""

    def _make(n: int, offset: int = 0) -> list[str]:
        return [f"{i + offset + 1:064x}" for i in range(n)]

    return _make


@pytest.fixture
def payload():
    return {"aps": {"alert": "Hello", "sound": "default"}}
