"""Codec for engine-safe bundle URLs.

Some JavaScript engines drop the query string from source URLs, so the bundler
may encode ``/index.bundle?platform=web`` as ``/index.bundle//&platform=web``.
"""

from __future__ import annotations

_MARKER = "//&"


class JscSafeUrlCodec:
    """Detects and decodes the ``//&`` query marker."""

    def is_encoded(self, url: str) -> bool:
        return self._marker_index(url) != -1

    def decode(self, url: str) -> str:
        index = self._marker_index(url)
        if index == -1:
            return url
        return url[:index] + "?" + url[index + len(_MARKER):]

    @staticmethod
    def _marker_index(url: str) -> int:
        # The marker only counts inside the path, before any real query or fragment.
        end = len(url)
        for delimiter in ("?", "#"):
            position = url.find(delimiter)
            if position != -1:
                end = min(end, position)
        scheme_end = url.find("://")
        start = scheme_end + 3 if scheme_end != -1 and scheme_end < end else 0
        return url.find(_MARKER, start, end)


__all__ = ["JscSafeUrlCodec"]
