"""Extraction of named documents from a multiplexed service response."""

from __future__ import annotations

import string
from typing import Iterable, Iterator, Optional, Tuple

from ..logging import get_logger
from ..models import ParsedDocumentSet
from ..prompting.constants import END_MARKER_FMT

_START_TOKEN = "[START_"
_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_.-")
_RESERVED_NAMES = frozenset({".", ".."})


class ResponseParser:
    """Finds balanced ``[START_name]...[END_name]`` blocks, left to right."""

    def __init__(self, allowed: Optional[Iterable[str]] = None) -> None:
        self.allowed = frozenset(allowed) if allowed is not None else None
        self.logger = get_logger("postproc.markers")

    def parse(self, text: str) -> ParsedDocumentSet:
        """Return a name -> trimmed content mapping; never raises."""
        documents: ParsedDocumentSet = {}
        for name, body in self.iter_blocks(text):
            if name in _RESERVED_NAMES:
                self.logger.debug("Ignoring block with reserved name %r", name)
                continue
            if self.allowed is not None and name not in self.allowed:
                self.logger.debug("Ignoring unexpected document block %r", name)
                continue
            documents[name] = body.strip()
        return documents

    def iter_blocks(self, text: str) -> Iterator[Tuple[str, str]]:
        """Yield ``(name, raw body)`` for each non-overlapping marker pair.

        A start marker without a matching end marker is skipped and scanning
        resumes one character after it; the first matching end marker closes
        the block.
        """
        position = 0
        while True:
            start_index = text.find(_START_TOKEN, position)
            if start_index == -1:
                return
            name_start = start_index + len(_START_TOKEN)
            name_end = name_start
            while name_end < len(text) and text[name_end] in _NAME_CHARS:
                name_end += 1
            if name_end == name_start or name_end >= len(text) or text[name_end] != "]":
                position = start_index + 1
                continue
            name = text[name_start:name_end]
            end_token = END_MARKER_FMT.format(name=name)
            body_start = name_end + 1
            end_index = text.find(end_token, body_start)
            if end_index == -1:
                position = start_index + 1
                continue
            yield name, text[body_start:end_index]
            position = end_index + len(end_token)


__all__ = ["ResponseParser"]
