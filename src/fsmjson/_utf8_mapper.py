"""Maps UTF-8 byte offsets back to character offsets of the source text."""

from __future__ import annotations

from bisect import bisect_right
from typing import Final

ASCII_LIMIT = 0x7F


def _utf8_length(char: str) -> int:
    code = ord(char)
    if code <= ASCII_LIMIT:
        return 1
    if code <= 0x7FF:
        return 2
    if 0xDC80 <= code <= 0xDCFF:
        # surrogateescape stands in for one undecodable byte
        return 1
    if code <= 0xFFFF:
        return 3
    return 4


class UTF8PositionMapper:
    """
    Translates byte positions in the UTF-8 encoding of ``text``.

    Decoding errors are located in bytes because the decoder never sees
    characters. For text documents the offsets are converted back so they
    index the string the caller passed in. Checkpoints are recorded every
    ``checkpoint_interval`` characters and lookups walk forward from the
    nearest one.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self._is_ascii_only: bool = text.isascii()
        self._byte_marks: list[int] = []
        self._char_marks: list[int] = []
        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        byte_pos = 0
        for char_pos, char in enumerate(self.text):
            if char_pos % self.checkpoint_interval == 0:
                self._byte_marks.append(byte_pos)
                self._char_marks.append(char_pos)
            byte_pos += _utf8_length(char)
        self._byte_marks.append(byte_pos)
        self._char_marks.append(len(self.text))

    def byte_to_char(self, byte_pos: int) -> int:
        """
        Converts a byte position to the character containing that byte.

        Positions past the end of the encoded text map past the last
        character, one byte per character.
        """
        if self._is_ascii_only:
            return byte_pos

        index = bisect_right(self._byte_marks, byte_pos) - 1
        current_byte = self._byte_marks[index]
        current_char = self._char_marks[index]
        if current_char >= len(self.text):
            return current_char + (byte_pos - current_byte)

        text = self.text
        while current_char < len(text):
            width = _utf8_length(text[current_char])
            if current_byte + width > byte_pos:
                break
            current_byte += width
            current_char += 1
        return current_char

    def column(self, char_pos: int) -> int:
        """1-based column of ``char_pos`` within its line."""
        return char_pos - self.text.rfind("\n", 0, char_pos)
