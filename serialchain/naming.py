"""Content-addressed artifact names."""

from __future__ import annotations

import hashlib
import posixpath
import re

_UNSAFE_HTML_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def hash_string(text: str) -> str:
    """Return the hex md5 digest of ``text`` encoded as UTF-8."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def get_file_name(path: str) -> str:
    """Return the basename of ``path`` without its final extension."""
    base = posixpath.basename(path.replace("\\", "/"))
    stem, dot, _ = base.rpartition(".")
    return stem if dot and stem else base


def file_name_from_contents(filepath: str, src: str) -> str:
    """Derive a stable, cache-busting name from a logical path and its contents."""
    return f"{get_file_name(filepath)}-{hash_string(filepath + src)}"


def path_to_html_safe_name(path: str) -> str:
    return _UNSAFE_HTML_CHARS.sub("_", path)


__all__ = [
    "file_name_from_contents",
    "get_file_name",
    "hash_string",
    "path_to_html_safe_name",
]
