"""
Shared fixtures

skilldown.lib.log replaces loguru's default handler at import time, so it
is imported here before any test adds its own sink.
"""

import pytest
from loguru import logger

import skilldown.lib.log  # noqa: F401
from skilldown.lib.references import referenceCache_clear
from skilldown.models.markup import ReferenceTable


@pytest.fixture
def warnings():
    """Messages of every warning emitted during the test"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def empty_references():
    return ReferenceTable()


@pytest.fixture
def fresh_reference_cache():
    referenceCache_clear()
    yield
    referenceCache_clear()


class FakeEncoder:
    """Whitespace 'tokenizer' standing in for tiktoken"""

    def encode(self, text):
        return text.split()


@pytest.fixture
def fake_encoder():
    return FakeEncoder()
