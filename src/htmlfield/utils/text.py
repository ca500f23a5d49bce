"""Text and URL helpers."""

from __future__ import annotations

import posixpath
from html import unescape


def decode_entities(text: str) -> str:
    """Decode HTML entities, e.g. ``&amp;`` -> ``&``."""
    return unescape(text)


def ensure_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


def remove_prefix(text: str, prefix: str) -> str:
    return text[len(prefix):] if prefix and text.startswith(prefix) else text


def split_file_path(uri: str) -> tuple[str, str]:
    """Split ``a/b/c.jpg`` into (``c.jpg``, ``a/b``); the folder is ``""`` at the root."""
    folder, filename = posixpath.split(uri)
    return filename, folder
