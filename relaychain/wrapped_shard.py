"""A byte buffer of even length, viewable as bytes or as 16-bit words."""

from __future__ import annotations

from typing import Iterable, Sequence


class WrappedShard:
    """Byte data padded to an even length, with a view as pairs of bytes."""

    __slots__ = ("_inner",)

    def __init__(self, data: bytes | bytearray | Iterable[int] = b"") -> None:
        inner = bytearray(data)
        if len(inner) % 2:
            inner.append(0)
        self._inner = inner

    def to_bytes(self) -> bytes:
        """Return the shard's bytes."""
        return bytes(self._inner)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __len__(self) -> int:
        return len(self._inner)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WrappedShard):
            return NotImplemented
        return self._inner == other._inner

    def __hash__(self) -> int:
        return hash(bytes(self._inner))

    def __repr__(self) -> str:
        return f"WrappedShard({bytes(self._inner)!r})"

    def words(self) -> list[tuple[int, int]]:
        """Return the shard as a list of two-byte pairs, in order."""
        data = self._inner
        return list(zip(data[0::2], data[1::2]))

    def set_word(self, index: int, word: Sequence[int]) -> None:
        """Overwrite the two-byte pair at ``index``."""
        if len(word) != 2:
            raise ValueError("a word is exactly two bytes")
        count = len(self._inner) // 2
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError("word index out of range")
        self._inner[2 * index : 2 * index + 2] = bytes(word)

    @classmethod
    def from_words(cls, words: Iterable[Sequence[int]]) -> "WrappedShard":
        """Build a shard from an iterable of two-byte pairs."""
        inner = bytearray()
        for word in words:
            if len(word) != 2:
                raise ValueError("a word is exactly two bytes")
            inner.extend(bytes(word))
        return cls(inner)