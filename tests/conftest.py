"""Configuração do pytest para o projeto Intent Gateway."""

import hashlib
import hmac
import sys
import time
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

TEST_SECRET = "test-secret"


def build_signed_headers(
    user_id: str = "user-1",
    *,
    request_id: str = "req-1",
    secret: str = TEST_SECRET,
    timestamp: float | None = None,
) -> dict[str, str]:
    """Headers assinados no modo identity ("{user_id}:{timestamp}")."""
    raw_ts = str(int(time.time() if timestamp is None else timestamp))
    signature = hmac.new(
        secret.encode(), f"{user_id}:{raw_ts}".encode(), hashlib.sha256
    ).hexdigest()
    return {
        "x-user-id": user_id,
        "x-request-id": request_id,
        "x-timestamp": raw_ts,
        "x-signature": signature,
    }


@pytest.fixture
def signed_headers():
    """Factory de headers assinados com o segredo de teste."""
    return build_signed_headers
