"""
Note Translator — Google Gemini Transcriber
=============================================

What:  Concrete Transcriber using Google Gemini for handwritten note images.
Why:   Gemini reads handwriting well and can be forced to answer in a fixed
       JSON schema, so one call yields a ready-made title/content pair.
How:   Sends the inline image + a fixed instruction prompt with a strict
       two-field response schema, then parses the structured output.
Who:   Instantiated once at import time; called by TranscriptionService for
       every image of a batch, one at a time.

Recovery Strategy:
    - SDK/network/credential failures → TranscriptionError (the batch loop
      turns it into a fallback note for this image only)
    - Unparsable or off-schema output → local recovery inside this module:
      default title, raw text as content. Never raised.
    No retry and no circuit breaker: each image gets exactly one call.
"""

import json
import logging
import time
import uuid

import google.generativeai as genai

from note_translator.config import settings
from note_translator.exceptions import TranscriptionError
from note_translator.schemas.note import (
    DEFAULT_NOTE_TITLE,
    TRANSCRIBE_FAILED_MARKER,
    Note,
)
from note_translator.services.llm_base import Transcriber

logger = logging.getLogger(__name__)


# What: Strict output schema for one note
# Keys are declared in the order the model should emit them (title first)
NOTE_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "A brief title describing the overall content of the image",
        },
        "content": {
            "type": "string",
            "description": "The complete transcribed and formatted note content from the entire image",
        },
    },
    "required": ["title", "content"],
}


def parse_note_response(raw_text: str) -> Note:
    """
    Turn the model's structured output into a Note.

    What:    Parses the JSON body and fills defaults for missing fields.
    Fallback:
        - Not JSON, not an object, or neither schema key present →
          default title, raw text as content ("Failed to transcribe" when
          the raw text is empty)
        - Object with only some keys → default title / empty content for
          whichever is missing

    Never raises; a broken response still produces a Note.
    """
    try:
        payload = json.loads(raw_text or "{}")
        if not isinstance(payload, dict) or not ({"title", "content"} & payload.keys()):
            raise ValueError("response does not match the note schema")
        title = payload.get("title") or DEFAULT_NOTE_TITLE
        content = payload.get("content") or ""
        return Note(title=str(title), content=str(content))
    except (ValueError, TypeError) as e:
        # json.JSONDecodeError is a ValueError
        logger.warning(
            "Failed to parse structured response, falling back to text: %s", str(e)
        )
        return Note(
            title=DEFAULT_NOTE_TITLE,
            content=raw_text or TRANSCRIBE_FAILED_MARKER,
        )


class GeminiTranscriber(Transcriber):
    """
    Google Gemini implementation of the Transcriber interface.

    Architecture:
        - Singleton instance created at import time
        - Configures the SDK with the API key when one is present
        - One generate_content call per image, no conversation state, so
          nothing from one image can bleed into the next
    """

    # Why this prompt: accuracy first, then structure. The closing rule
    # forces ONE title and ONE content even when the page has several
    # visual sections, because the endpoint pairs notes with images 1:1.
    TRANSCRIBE_PROMPT = """
You are an expert transcriber of handwritten notes. Your primary goal is to accurately convert the text from an image of handwritten notes into a clear, well-formatted digital text.

Here are the rules you must follow:

1.  **Accuracy First**: Transcribe all text precisely as it appears in the image. Do not omit any words or phrases.
2.  **Maintain Formatting**: Replicate the original layout and formatting as closely as possible.
    *   Use bullet points (`*` or `-`) for lists.
    *   Use arrows (`->` or `$\\rightarrow$`) as they appear.
    *   Preserve line breaks and paragraph separations.
    *   Maintain indentation where it is clearly present.
3.  **Grammar and Clarity (Careful Refinement)**:
    *   Correct grammatical errors, spelling mistakes, and punctuation issues.
4.  **No Extraneous Information**: Do not add any commentary, explanations, or information not present in the original notes.

IMPORTANT: Treat the entire image as ONE note. Do not split it into multiple notes or sections. Create ONE title that describes the overall content of the image, and ONE content field with all the transcribed text.

Example Input (mental representation):
[Image of handwritten notes with bullet points and arrows]

Example Output (desired):
- This is a bullet point.
-> An arrow leads to this.
- Another point.
    - Sub-point."""

    def __init__(self):
        # Why global configure: The SDK keeps auth in module-level state
        if settings.has_gemini_key:
            genai.configure(api_key=settings.gemini_api_key)

        self.model = genai.GenerativeModel(settings.gemini_model)
        self.generation_config = genai.GenerationConfig(
            response_mime_type="application/json",
            response_schema=NOTE_RESPONSE_SCHEMA,
        )

        logger.info(
            "GeminiTranscriber initialized with model=%s, api_key=%s",
            settings.gemini_model,
            "set" if settings.has_gemini_key else "missing",
        )

    async def transcribe(self, image_bytes: bytes, media_type: str) -> Note:
        """
        Transcribe one image with Gemini.

        Flow:
            1. Refuse early when no API key is configured
            2. Send [inline image, prompt] with the JSON schema config
            3. Parse the structured output (local fallback on bad output)

        Raises:
            TranscriptionError: credential missing or the API call failed
        """
        # Per-call ID to correlate the start/finish log lines of one image
        call_id = str(uuid.uuid4())[:8]

        if not settings.has_gemini_key:
            raise TranscriptionError(
                message="Gemini API key is not configured",
                context={"call_id": call_id},
            )

        logger.info(
            "[%s] Starting Gemini transcription (%s, %d bytes)",
            call_id,
            media_type,
            len(image_bytes),
        )
        start_time = time.time()

        try:
            response = await self.model.generate_content_async(
                [
                    {"mime_type": media_type, "data": image_bytes},
                    self.TRANSCRIBE_PROMPT,
                ],
                generation_config=self.generation_config,
                request_options={"timeout": settings.request_timeout},
            )
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.warning(
                "[%s] Gemini API call failed after %.0fms: %s",
                call_id,
                duration_ms,
                str(e),
            )
            raise TranscriptionError(
                message="Gemini API call failed",
                context={"call_id": call_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        raw_text = self._response_text(response, call_id)

        logger.info(
            "[%s] Gemini transcription completed in %.0fms, received %d chars",
            call_id,
            duration_ms,
            len(raw_text),
        )
        return parse_note_response(raw_text)

    @staticmethod
    def _response_text(response, call_id: str) -> str:
        """
        Read the text of a response.

        The SDK's .text accessor raises ValueError when the candidate has no
        parts (e.g. blocked by safety filters); that is treated as an empty
        answer so the parse fallback applies.
        """
        try:
            return response.text or ""
        except ValueError as e:
            logger.warning("[%s] Gemini response carried no text: %s", call_id, str(e))
            return ""

    async def health_check(self) -> bool:
        """
        Check whether Gemini can be called.

        Only the credential is inspected; no API request is made, so health
        probes never consume quota.
        """
        return settings.has_gemini_key


# ── Singleton Instance ────────────────────────────────────────────────────
gemini_service = GeminiTranscriber()
