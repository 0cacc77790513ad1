import pytest
from unittest.mock import patch, mock_open

from ask_llm.types import DocumentContent, ImageContent, Message, MixedContent, Role, TextContent
from ask_llm.utils import (
    attachment_from_path, create_document_content, create_image_content, create_message,
    create_text_content, encode_file, guess_media_type,
)


class TestUtils:

    def test_create_text_content(self):
        assert create_text_content("Hello") == TextContent("Hello")

    def test_create_image_content_from_base64(self):
        content = create_image_content("SGVsbG8=", mime_type="image/png")
        assert content == ImageContent("SGVsbG8=", "image/png")

    def test_create_image_content_from_data_uri(self):
        content = create_image_content("data:image/webp;base64,UklGRg==")
        assert content == ImageContent("UklGRg==", "image/webp")

    def test_create_image_content_from_path(self, tmp_path):
        path = tmp_path / "pixel.png"
        path.write_bytes(b"image data")
        assert create_image_content(str(path)) == ImageContent("aW1hZ2UgZGF0YQ==", "image/png")

    def test_create_image_content_unknown_source(self):
        with pytest.raises(ValueError, match="Cannot determine source type"):
            create_image_content("definitely-not-a-file")

    def test_create_document_content(self):
        content = create_document_content("JVBERi0=", mime_type="application/pdf")
        assert content == DocumentContent("JVBERi0=", "application/pdf")

    def test_create_message_text(self):
        assert create_message("user", "Hello world") == Message(Role.USER, TextContent("Hello world"))

    def test_create_message_multimodal(self):
        image = ImageContent("AAAA", "image/jpeg")
        msg = create_message(Role.USER, ["Look at this", image])
        assert msg.role is Role.USER
        assert msg.content == MixedContent((TextContent("Look at this"), image))

    def test_create_message_passthrough(self):
        doc = DocumentContent("AAAA", "application/pdf")
        assert create_message("assistant", doc) == Message(Role.ASSISTANT, doc)

    @patch("pathlib.Path.is_file")
    @patch("builtins.open", new_callable=mock_open, read_data=b"image data")
    def test_encode_file(self, mock_file, mock_is_file):
        mock_is_file.return_value = True

        b64_data, mime_type = encode_file("test.jpg")

        assert mime_type == "image/jpeg"
        # "image data" in base64 is "aW1hZ2UgZGF0YQ=="
        assert b64_data == "aW1hZ2UgZGF0YQ=="

    def test_encode_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            encode_file(tmp_path / "nope.png")

    @pytest.mark.parametrize("name, expected", [
        ("report.PDF", "application/pdf"),
        ("notes.txt", "text/plain"),
        ("photo.jpeg", "image/jpeg"),
        ("archive.unknownext", "application/octet-stream"),
    ])
    def test_guess_media_type(self, name, expected):
        assert guess_media_type(name) == expected

    def test_attachment_from_path(self, tmp_path):
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"%PDF-")
        attachment = attachment_from_path(path)
        assert attachment.media_type == "application/pdf"
        assert attachment.base64_data == "JVBERi0="
