import pytest

from aistudio_mcp.files import DEFAULT_MIME_TYPE, guess_mime_type

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("report.pdf", "application/pdf"),
        ("/tmp/photo.png", "image/png"),
        ("song.mp3", "audio/mpeg"),
        ("clip.mov", "video/quicktime"),
        ("notes.txt", "text/plain"),
        ("SCAN.PDF", "application/pdf"),
    ],
)
def test_known_extensions(path, expected):
    assert guess_mime_type(path) == expected


@pytest.mark.parametrize("path", ["archive.xyz", "Makefile", "dir.d/noext"])
def test_unknown_extension_uses_default(path):
    assert guess_mime_type(path) == DEFAULT_MIME_TYPE == "application/octet-stream"
