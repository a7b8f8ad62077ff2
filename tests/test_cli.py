"""
Note Translator — Command Line Tests
======================================

What:  Tests for `note-translator transcribe` driving a review session.
How:   TranscriptionClient is patched with a fake; files live in tmp_path.
"""

from unittest.mock import patch

import pytest

from note_translator.cli import build_parser, main
from note_translator.exceptions import ClientRequestError
from note_translator.schemas.note import Note


class FakeClient:
    def __init__(self, base_url=None, error=None):
        self.base_url = base_url
        self.error = error

    async def transcribe(self, images):
        if self.error:
            raise self.error
        return [Note(title=f"Page {i + 1}", content=image.filename) for i, image in enumerate(images)]


@pytest.fixture(autouse=True)
def keep_test_logging():
    """main() reconfigures the root logger; leave pytest's capture alone."""
    with patch("note_translator.main.setup_logging"):
        yield


@pytest.fixture
def image_files(tmp_path, sample_image_bytes):
    paths = []
    for name in ("one.jpg", "two.png"):
        path = tmp_path / name
        path.write_bytes(sample_image_bytes)
        paths.append(path)
    return paths


class TestParser:

    def test_transcribe_defaults(self):
        args = build_parser().parse_args(["transcribe", "a.png", "b.png"])
        assert args.command == "transcribe"
        assert args.images == ["a.png", "b.png"]
        assert args.output is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestTranscribeCommand:

    def test_prints_copy_all_export(self, image_files, capsys):
        with patch("note_translator.cli.TranscriptionClient", FakeClient):
            code = main(["transcribe", *map(str, image_files)])

        assert code == 0
        out = capsys.readouterr().out
        assert out == "Page 1\none.jpg\n\n---\n\nPage 2\ntwo.png\n"

    def test_writes_output_file(self, image_files, tmp_path):
        target = tmp_path / "notes.txt"
        with patch("note_translator.cli.TranscriptionClient", FakeClient):
            code = main(["transcribe", *map(str, image_files), "--output", str(target)])

        assert code == 0
        assert target.read_text(encoding="utf-8").startswith("Page 1\none.jpg")

    def test_non_images_only_is_an_error(self, tmp_path, capsys):
        text_file = tmp_path / "notes.txt"
        text_file.write_text("typed, not handwritten")

        with patch("note_translator.cli.TranscriptionClient", FakeClient):
            code = main(["transcribe", str(text_file)])

        assert code == 2
        assert "Please select image files" in capsys.readouterr().err

    def test_failed_batch_exits_non_zero(self, image_files, capsys):
        def failing_client(base_url=None):
            return FakeClient(base_url=base_url, error=ClientRequestError(status_code=500))

        with patch("note_translator.cli.TranscriptionClient", failing_client):
            code = main(["transcribe", *map(str, image_files)])

        assert code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Failed to transcribe images" in captured.err
