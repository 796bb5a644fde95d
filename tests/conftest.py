from pathlib import Path

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 32
JPG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
GIF_BYTES = b"GIF89a" + b"\x00" * 32


@pytest.fixture
def make_files():
    """Create files under a root; returns their paths in argument order."""

    def _make(root: Path, *names: str, content: bytes | None = None):
        paths = []
        for name in names:
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(name.encode() if content is None else content)
            paths.append(path)
        return paths

    return _make
