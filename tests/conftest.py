"""Configuração de fixtures para testes."""

from collections.abc import Mapping
from typing import Any

import pytest


class RecordingListener:
    """Listener que guarda os eventos recebidos."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Mapping[str, Any]]] = []

    def handle(self, event: str, payload: Mapping[str, Any]) -> None:
        self.events.append((event, payload))


@pytest.fixture
def recording_listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def sample_data() -> dict:
    """Dados de exemplo para testes."""
    return {"user_id": 123, "name": "Test User", "active": True}


@pytest.fixture
def sample_bytes() -> bytes:
    """Bytes de exemplo para testes."""
    return b"test data bytes"
