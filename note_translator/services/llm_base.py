"""
Note Translator — Abstract Transcriber Interface
==================================================

What:  Abstract base class defining the contract for image → Note transcription.
Why:   The hosted model is an opaque remote capability. Hiding it behind
       one method lets the batch orchestrator, the routes and the tests
       work against a stub without touching the Gemini SDK.
How:   Concrete implementations inherit from Transcriber and implement
       transcribe() and health_check().
Who:   Called by TranscriptionService once per image, sequentially.
"""

from abc import ABC, abstractmethod

from note_translator.schemas.note import Note


class Transcriber(ABC):
    """
    Abstract interface for AI-powered handwritten note transcription.

    Contract:
        - transcribe() turns ONE image into exactly ONE Note
        - Unparsable model output is recovered locally (default title, raw
          text as content); it is never raised to the caller
        - Failures of the call itself are raised as TranscriptionError
        - The caller must not need to know which provider is used

    Implementations:
        - GeminiTranscriber: Google Gemini with structured JSON output
    """

    @abstractmethod
    async def transcribe(self, image_bytes: bytes, media_type: str) -> Note:
        """
        Transcribe a single handwritten note image.

        Args:
            image_bytes: Raw image content.
            media_type:  Declared media type of the image (e.g. "image/png").

        Returns:
            Note: the title/content pair for the whole image.

        Raises:
            TranscriptionError: When the model call fails for this image.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Report whether the transcriber is able to make calls.

        Returns: True if the provider looks usable, False otherwise.
        """
        ...
