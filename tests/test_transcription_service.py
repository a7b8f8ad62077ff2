"""
Note Translator — Transcription Service Unit Tests
====================================================

What:  Tests for the batch loop and its per-image failure policy.
How:   Uses StubTranscriber from conftest (no Gemini, no HTTP).

What we test:
    ✅ N images → N notes, same order
    ✅ Empty batch rejected before any transcriber call
    ✅ A failing image yields a fallback note; neighbours are untouched
    ✅ Oversized / empty images fail individually
    ✅ Images are processed one at a time
"""

import pytest
from unittest.mock import patch

from conftest import StubTranscriber
from note_translator.config import settings
from note_translator.exceptions import NoImagesError
from note_translator.services.transcription_service import TranscriptionService


class TestTranscribeBatch:
    """Tests for TranscriptionService.transcribe_batch()."""

    @pytest.mark.asyncio
    async def test_returns_one_note_per_image_in_order(self, stub_transcriber, make_image):
        service = TranscriptionService(transcriber=stub_transcriber)
        images = [make_image(f"page{i}.png", f"page {i}".encode()) for i in range(1, 5)]

        notes = await service.transcribe_batch(images)

        assert len(notes) == 4
        assert [n.content for n in notes] == ["page 1", "page 2", "page 3", "page 4"]
        assert [n.title for n in notes] == ["Note 1", "Note 2", "Note 3", "Note 4"]

    @pytest.mark.asyncio
    async def test_passes_media_type_through(self, stub_transcriber, make_image):
        service = TranscriptionService(transcriber=stub_transcriber)
        await service.transcribe_batch([make_image("scan.jpg", b"x", "image/jpeg")])

        assert stub_transcriber.calls == [(b"x", "image/jpeg")]

    @pytest.mark.asyncio
    async def test_empty_batch_rejected_without_calls(self, stub_transcriber):
        service = TranscriptionService(transcriber=stub_transcriber)

        with pytest.raises(NoImagesError, match="No files provided"):
            await service.transcribe_batch([])

        assert stub_transcriber.calls == []

    @pytest.mark.asyncio
    async def test_failed_image_gets_fallback_note(self, make_image):
        stub = StubTranscriber(fail_on={2})
        service = TranscriptionService(transcriber=stub)
        images = [
            make_image("a.png", b"first"),
            make_image("b.png", b"second"),
            make_image("c.png", b"third"),
        ]

        notes = await service.transcribe_batch(images)

        assert len(notes) == 3
        assert notes[1].title == "Failed to transcribe b.png"
        assert notes[1].content == "Error processing this image"
        # Neighbours are unaffected
        assert notes[0].content == "first"
        assert notes[2].content == "third"
        assert len(stub.calls) == 3

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, make_image):
        stub = StubTranscriber(fail_on={1}, error=RuntimeError("boom"))
        service = TranscriptionService(transcriber=stub)

        notes = await service.transcribe_batch([make_image("x.png"), make_image("y.png", b"ok")])

        assert notes[0].title == "Failed to transcribe x.png"
        assert notes[1].content == "ok"

    @pytest.mark.asyncio
    async def test_every_image_failing_still_returns_full_batch(self, make_image):
        stub = StubTranscriber(fail_on={1, 2})
        service = TranscriptionService(transcriber=stub)

        notes = await service.transcribe_batch([make_image("1.png"), make_image("2.png")])

        assert [n.title for n in notes] == [
            "Failed to transcribe 1.png",
            "Failed to transcribe 2.png",
        ]

    @pytest.mark.asyncio
    async def test_unnamed_image_uses_position(self, make_image):
        stub = StubTranscriber(fail_on={2})
        service = TranscriptionService(transcriber=stub)

        notes = await service.transcribe_batch([make_image("a.png"), make_image(filename=None)])

        assert notes[1].title == "Failed to transcribe image 2"

    @pytest.mark.asyncio
    async def test_oversized_image_fails_alone(self, stub_transcriber, make_image):
        service = TranscriptionService(transcriber=stub_transcriber)
        images = [make_image("big.png", b"x" * 11), make_image("small.png", b"tiny")]

        with patch.object(settings, "max_file_size", 10):
            notes = await service.transcribe_batch(images)

        assert notes[0].title == "Failed to transcribe big.png"
        assert notes[1].content == "tiny"
        # The oversized image never reached the model
        assert stub_transcriber.calls == [(b"tiny", "image/png")]

    @pytest.mark.asyncio
    async def test_empty_image_fails_alone(self, stub_transcriber, make_image):
        service = TranscriptionService(transcriber=stub_transcriber)

        notes = await service.transcribe_batch([make_image("blank.png", b""), make_image("b.png", b"b")])

        assert notes[0].title == "Failed to transcribe blank.png"
        assert notes[1].content == "b"

    @pytest.mark.asyncio
    async def test_images_are_processed_sequentially(self, stub_transcriber, make_image):
        service = TranscriptionService(transcriber=stub_transcriber)

        await service.transcribe_batch([make_image(f"{i}.png") for i in range(5)])

        assert stub_transcriber.max_in_flight == 1
        assert len(stub_transcriber.calls) == 5
