"""
Note Translator — Batch Transcription Service
===============================================

What:  Orchestrates one batch: every image → one Note, in submission order.
Why:   Keeps the per-image failure policy out of the HTTP layer so it can be
       tested without a server.
How:   Sequential loop over the images. Each iteration validates the image,
       calls the transcriber, and on ANY failure substitutes a fallback note
       naming that image.
Who:   Called by POST /api/img-to-text.

Orchestration Flow:
    ┌──────────┐    ┌────────────┐    ┌──────────────┐    ┌───────────┐
    │  Batch   │───▶│  Validate  │───▶│  Transcriber │───▶│  notes[i] │
    │  (Route) │    │  image i   │    │  (Gemini)    │    │           │
    └──────────┘    └────────────┘    └──────────────┘    └───────────┘
                          │                  │
                          └──── failure ─────┴──▶ Note.fallback(image i)

    Images are processed one after another, never concurrently: each call
    sees a single image, so the model cannot mix content between them.
"""

import logging
from typing import List, Optional

from note_translator.config import settings
from note_translator.exceptions import NoImagesError, TranscriptionError
from note_translator.schemas.note import ImageUpload, Note
from note_translator.services.gemini_service import gemini_service
from note_translator.services.llm_base import Transcriber

logger = logging.getLogger(__name__)


class TranscriptionService:
    """
    Business logic for batch transcription.

    Guarantees:
        - len(result) == len(images), result[i] belongs to images[i]
        - A failing image never aborts or alters any other image
        - An empty batch is rejected before any transcriber call
    """

    def __init__(self, transcriber: Optional[Transcriber] = None):
        self.transcriber = transcriber if transcriber is not None else gemini_service

    def validate_image(self, image: ImageUpload, position: int) -> None:
        """
        Reject an image that cannot be sent to the model.

        Raises:
            TranscriptionError for empty content or content above
            settings.max_file_size. Only this image is affected.
        """
        label = image.label(position)
        size = len(image.content)

        if size == 0:
            raise TranscriptionError(message="Image is empty", filename=label)

        if size > settings.max_file_size:
            max_mb = settings.max_file_size / (1024 * 1024)
            raise TranscriptionError(
                message=f"Image size ({size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                filename=label,
                context={"actual_size": size, "max_size_mb": max_mb},
            )

    async def transcribe_batch(self, images: List[ImageUpload]) -> List[Note]:
        """
        Transcribe every image of a batch.

        Args:
            images: Ordered images of one submission.

        Returns:
            One Note per image, same order. Failed images yield
            Note.fallback(<filename>).

        Raises:
            NoImagesError: The batch is empty.
        """
        if not images:
            raise NoImagesError()

        logger.info("Transcribing batch of %d image(s)", len(images))
        notes: List[Note] = []
        failures = 0

        for position, image in enumerate(images, start=1):
            label = image.label(position)
            try:
                self.validate_image(image, position)
                note = await self.transcriber.transcribe(image.content, image.media_type)
            except Exception as e:
                # Any failure stays local to this image
                failures += 1
                logger.error(
                    "Failed to process %s: %s",
                    label,
                    e.message if isinstance(e, TranscriptionError) else str(e),
                    exc_info=not isinstance(e, TranscriptionError),
                )
                note = Note.fallback(label)
            notes.append(note)

        logger.info(
            "Batch complete: %d note(s), %d fallback(s)",
            len(notes),
            failures,
        )
        return notes


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless between batches; shared by every request
transcription_service = TranscriptionService()
