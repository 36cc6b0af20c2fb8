"""Unit tests for file name generation and saving images."""

import io
import sys
from unittest.mock import MagicMock

import pytest

from imgen.core.api import GeneratedImage, ImagesResponse
from imgen.core.inputs import OutputTarget
from imgen.core.output import auto_filename, prompt_prefix, save_images
from imgen.utils.exceptions import ValidationError


def _response(*contents: bytes, fmt: str = "PNG", created: int = 1713833628) -> ImagesResponse:
    return ImagesResponse(
        created=created,
        images=[GeneratedImage(content=c, format=fmt, width=1, height=1) for c in contents],
    )


@pytest.mark.unit
class TestPromptPrefix:
    @pytest.mark.parametrize(
        ("prompt", "expected"),
        [
            ("A cute baby otter", "a_cute_baby_otter"),
            ("Hello, World!", "hello_world"),
            ("one two three four five six seven", "one_two_three_four_five"),
            ("   spaced    out   ", "spaced_out"),
            ("Café au lait", "café_au_lait"),
            ("日本語 テスト", "日本語_テスト"),
            ("!!! ??? ...", "imgen"),
            ("", "imgen"),
        ],
    )
    def test_cases(self, prompt, expected):
        assert prompt_prefix(prompt) == expected

    def test_only_first_32_chars_considered(self):
        prompt = "abcdefghijklmnopqrstuvwxyz0123456789 tail"
        assert prompt_prefix(prompt) == "abcdefghijklmnopqrstuvwxyz012345"

    def test_word_limit_applies_after_char_limit(self):
        # Seven words survive the 32-char cut; only five are kept
        prompt = "A childrens book drawing of a veterinarian"
        assert prompt_prefix(prompt) == "a_childrens_book_drawing_of"

    def test_newlines_are_word_breaks(self):
        assert prompt_prefix("red\ncircle") == "red_circle"


@pytest.mark.unit
class TestAutoFilename:
    def test_format(self):
        name = auto_filename("A cute otter", 1713833628, 1, "png")
        assert name == "a_cute_otter.1713833628.1.png"

    def test_extension_passed_through(self):
        assert auto_filename("x", 5, 3, "webp") == "x.5.3.webp"


@pytest.mark.unit
class TestSaveImages:
    def test_auto_names_all_images(self, tmp_path):
        response = _response(b"one", b"two")

        paths = save_images(response, "A cute otter", OutputTarget.parse(None), directory=tmp_path)

        assert [p.name for p in paths] == [
            "a_cute_otter.1713833628.1.png",
            "a_cute_otter.1713833628.2.png",
        ]
        assert paths[0].read_bytes() == b"one"
        assert paths[1].read_bytes() == b"two"

    def test_auto_uses_image_format_extension(self, tmp_path):
        paths = save_images(
            _response(b"jpeg", fmt="JPEG"), "otter", OutputTarget.parse(None), directory=tmp_path
        )
        assert paths[0].suffix == ".jpg"

    def test_auto_creates_directory(self, tmp_path):
        out_dir = tmp_path / "nested" / "dir"
        paths = save_images(_response(b"x"), "p", OutputTarget.parse(None), directory=out_dir)
        assert paths[0].parent == out_dir
        assert paths[0].exists()

    def test_explicit_file(self, tmp_path):
        target_path = tmp_path / "sub" / "otter_hat.png"
        paths = save_images(_response(b"bytes"), "p", OutputTarget.parse(str(target_path)))
        assert paths == [target_path]
        assert target_path.read_bytes() == b"bytes"

    def test_stdout(self):
        stream = io.BytesIO()
        paths = save_images(_response(b"\x89PNG raw"), "p", OutputTarget.parse("-"), stdout=stream)
        assert paths == []
        assert stream.getvalue() == b"\x89PNG raw"

    def test_explicit_target_rejects_many_images(self, tmp_path):
        with pytest.raises(ValidationError):
            save_images(
                _response(b"a", b"b"), "p", OutputTarget.parse(str(tmp_path / "o.png"))
            )
        assert not (tmp_path / "o.png").exists()


@pytest.mark.unit
class TestPromptPrefixByteLimit:
    def test_two_byte_characters(self):
        # 20 two-byte characters, of which 16 fit in 32 bytes
        assert prompt_prefix("é" * 20) == "é" * 16

    def test_partial_character_dropped(self):
        # 'a' plus 15 two-byte characters is 31 bytes; the 16th would be split
        assert prompt_prefix("a" + "é" * 20) == "a" + "é" * 15

    def test_three_byte_characters(self):
        assert prompt_prefix("日本語のテキストを書いています") == "日本語のテキストを書"


@pytest.mark.unit
class TestSaveImagesDefaultStdout:
    def test_writes_to_process_stdout_buffer(self, monkeypatch):
        fake_stdout = MagicMock()
        fake_stdout.buffer = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", fake_stdout)

        paths = save_images(_response(b"raw image"), "p", OutputTarget.parse("-"))

        assert paths == []
        assert fake_stdout.buffer.getvalue() == b"raw image"
