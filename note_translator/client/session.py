"""
Note Translator — Upload / Review Session
===========================================

What:  The client-side flow: collect images → process → review → reset.
Why:   Keeps the view logic (what may happen when, what gets copied) in
       plain Python so any front end (the CLI, a desktop shell, a test)
       drives the same rules.
How:   A small explicit state machine over three views.

State Machine:

    ┌────────────┐  submit()   ┌────────────┐  notes   ┌────────────┐
    │ COLLECTING │────────────▶│ PROCESSING │─────────▶│ REVIEWING  │
    └────────────┘             └────────────┘          └────────────┘
          ▲                          │ failure               │
          │◀─────────────────────────┘ (images kept)         │
          │◀──────────────────────── reset() ────────────────┘

    Only one batch is ever in flight and there is no cancellation.
"""

import logging
import mimetypes
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

import aiofiles

from note_translator.client.api_client import TranscriptionClient
from note_translator.exceptions import ClientRequestError, InvalidStateError
from note_translator.schemas.note import ImageUpload, Note

logger = logging.getLogger(__name__)

# Joins notes in the "copy all" export
COPY_SEPARATOR = "\n\n---\n\n"

# How long a "Copied!" confirmation stays visible
COPIED_FEEDBACK_SECONDS = 2.0

# Feedback key for the "copy all" action
ALL_NOTES = "all"

NO_IMAGES_SELECTED = "Please select image files"
NOTHING_TO_SUBMIT = "Please select at least one image file"
SUBMIT_FAILED = "Failed to transcribe images. Please try again."
UNKNOWN_FILE = "Unknown file"


class ViewState(str, Enum):
    COLLECTING = "collecting"
    PROCESSING = "processing"
    REVIEWING = "reviewing"


def is_image(media_type: Optional[str]) -> bool:
    return bool(media_type) and media_type.startswith("image/")


async def load_image_file(path: Union[str, Path]) -> ImageUpload:
    """
    Read an image from disk into an ImageUpload.

    The media type is guessed from the file extension;
    unknown extensions get application/octet-stream and are later
    filtered out by ReviewSession.add_images().
    """
    path = Path(path)
    media_type, _ = mimetypes.guess_type(path.name)
    async with aiofiles.open(path, "rb") as f:
        content = await f.read()
    return ImageUpload(
        filename=path.name,
        content=content,
        media_type=media_type or "application/octet-stream",
    )


def note_text(note: Note) -> str:
    """Clipboard form of one note: title line, then the content."""
    return f"{note.title}\n{note.content}"


class ReviewSession:
    """
    Holds everything one user session sees: pending images, returned
    notes, the current error message and transient copy confirmations.

    Args:
        clock: Monotonic time source; tests pass a fake to expire the
               "copied" confirmation without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.state = ViewState.COLLECTING
        self.images: List[ImageUpload] = []
        self.notes: List[Note] = []
        self.error = ""
        self._copied_at: Dict[Union[int, str], float] = {}

    # ── Collecting ────────────────────────────────────────────────────────

    def _require(self, state: ViewState, action: str) -> None:
        if self.state != state:
            raise InvalidStateError(action=action, state=self.state.value)

    def add_images(self, files: Iterable[ImageUpload]) -> int:
        """
        Append the image files among `files` to the pending list.

        Non-image media types are dropped. Selections accumulate across
        calls. Returns how many images were added; when none qualify the
        error message asks for image files.
        """
        self._require(ViewState.COLLECTING, "add images")
        accepted = [f for f in files if is_image(f.media_type)]
        if not accepted:
            self.error = NO_IMAGES_SELECTED
            return 0
        self.images.extend(accepted)
        self.error = ""
        return len(accepted)

    def remove_image(self, index: int) -> ImageUpload:
        self._require(ViewState.COLLECTING, "remove images")
        return self.images.pop(index)

    # ── Processing ────────────────────────────────────────────────────────

    async def submit(self, client: TranscriptionClient) -> bool:
        """
        Send all pending images as one batch.

        Returns:
            True when the session moved to REVIEWING, False when it stayed
            in (or returned to) COLLECTING with `error` set. Pending images
            are kept on failure so the user can retry.
        """
        self._require(ViewState.COLLECTING, "submit")
        if not self.images:
            self.error = NOTHING_TO_SUBMIT
            return False

        self.state = ViewState.PROCESSING
        self.error = ""
        self.notes = []

        try:
            notes = await client.transcribe(list(self.images))
        except ClientRequestError as e:
            logger.error("Batch transcription failed: %s", e.message)
            self.error = SUBMIT_FAILED
            self.state = ViewState.COLLECTING
            return False

        self.notes = list(notes)
        self.state = ViewState.REVIEWING
        logger.info("Received %d note(s) for %d image(s)", len(self.notes), len(self.images))
        return True

    @property
    def processing_label(self) -> str:
        count = len(self.images)
        return f"Processing {count} image{'s' if count != 1 else ''}"

    # ── Reviewing ─────────────────────────────────────────────────────────

    def edit_content(self, index: int, content: str) -> Note:
        """Replace the content of note `index`; its title stays as returned."""
        self._require(ViewState.REVIEWING, "edit notes")
        updated = self.notes[index].model_copy(update={"content": content})
        self.notes[index] = updated
        return updated

    def source_name(self, index: int) -> str:
        """Filename of the image note `index` was made from."""
        if 0 <= index < len(self.images) and self.images[index].filename:
            return self.images[index].filename
        return UNKNOWN_FILE

    def note_text(self, index: int) -> str:
        return note_text(self.notes[index])

    def copy_all_text(self) -> str:
        return COPY_SEPARATOR.join(note_text(note) for note in self.notes)

    def copy_note(self, index: int) -> str:
        """Export text of one note; shows "copied" on that note."""
        self._require(ViewState.REVIEWING, "copy notes")
        text = self.note_text(index)
        self._copied_at[index] = self._clock()
        return text

    def copy_all(self) -> str:
        """Export text of every note; shows "copied" on the whole list."""
        self._require(ViewState.REVIEWING, "copy notes")
        text = self.copy_all_text()
        self._copied_at[ALL_NOTES] = self._clock()
        return text

    def is_copied(self, index: Union[int, str] = ALL_NOTES) -> bool:
        copied_at = self._copied_at.get(index)
        if copied_at is None:
            return False
        if self._clock() - copied_at >= COPIED_FEEDBACK_SECONDS:
            del self._copied_at[index]
            return False
        return True

    # ── Reset ─────────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Start over: drop images, notes, error and confirmations."""
        self.images = []
        self.notes = []
        self.error = ""
        self._copied_at.clear()
        self.state = ViewState.COLLECTING
