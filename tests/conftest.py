"""
Note Translator — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Inventory:
    ├── sample_image_bytes: Minimal JPEG bytes for uploads
    ├── make_image: Factory for ImageUpload objects
    ├── stub_transcriber: Transcriber double recording every call
    └── test_client: HTTPX AsyncClient wired to the FastAPI app
"""

import os

# Override settings for testing BEFORE any app imports
# Why: Prevents tests from using a real API key
os.environ["GEMINI_API_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import List, Optional, Set, Tuple  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from note_translator.exceptions import TranscriptionError  # noqa: E402
from note_translator.schemas.note import ImageUpload, Note  # noqa: E402
from note_translator.services.llm_base import Transcriber  # noqa: E402


class StubTranscriber(Transcriber):
    """
    Stands in for Gemini.

    Returns Note(title="Note <n>", content=<image bytes decoded>) for the
    n-th call, and raises for any call number listed in `fail_on`.
    Tracks concurrency so tests can assert images never overlap.
    """

    def __init__(self, fail_on: Optional[Set[int]] = None, error: Optional[Exception] = None):
        self.fail_on = fail_on or set()
        self.error = error
        self.calls: List[Tuple[bytes, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def transcribe(self, image_bytes: bytes, media_type: str) -> Note:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.calls.append((image_bytes, media_type))
            call_number = len(self.calls)
            if call_number in self.fail_on:
                raise self.error or TranscriptionError(message="Gemini API call failed")
            return Note(
                title=f"Note {call_number}",
                content=image_bytes.decode("utf-8", errors="replace"),
            )
        finally:
            self.in_flight -= 1

    async def health_check(self) -> bool:
        return True


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: Start of Image (FFD8) + JFIF marker + End of Image (FFD9)."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def make_image():
    """
    Factory for ImageUpload test data.

    Usage:
        image = make_image("page1.png", b"first page")
    """
    def _make(filename="note.png", content=b"handwritten", media_type="image/png"):
        return ImageUpload(filename=filename, content=content, media_type=media_type)
    return _make


@pytest.fixture
def stub_transcriber():
    return StubTranscriber()


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from note_translator.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
