"""Basic parachain data types and their compact binary encoding."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

_U32_LIMIT = 1 << 32
_MAX_BIG_COMPACT_BYTES = 67


class CodecError(ValueError):
    """Raised when encoded data cannot be decoded."""


def blake2_256(data: bytes) -> bytes:
    """Return the 32-byte BLAKE2b digest of ``data``."""
    return hashlib.blake2b(bytes(data), digest_size=32).digest()


def encode_u32(value: int) -> bytes:
    """Encode an unsigned 32-bit integer, little-endian."""
    if not 0 <= value < _U32_LIMIT:
        raise ValueError(f"{value} does not fit in an unsigned 32-bit integer")
    return value.to_bytes(4, "little")


def encode_compact(value: int) -> bytes:
    """Encode a non-negative integer in the compact variable-length form."""
    if value < 0:
        raise ValueError("compact integers must not be negative")
    if value < 1 << 6:
        return bytes([value << 2])
    if value < 1 << 14:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < 1 << 30:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    length = max(4, (value.bit_length() + 7) // 8)
    if length > _MAX_BIG_COMPACT_BYTES:
        raise ValueError("integer too large for compact encoding")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def encode_bytes(data: bytes) -> bytes:
    """Encode a byte string prefixed with its compact length."""
    data = bytes(data)
    return encode_compact(len(data)) + data


class Reader:
    """Sequential reader over encoded bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def read(self, n: int) -> bytes:
        """Read exactly ``n`` bytes."""
        if n < 0:
            raise ValueError("cannot read a negative number of bytes")
        end = self._pos + n
        if end > len(self._data):
            raise CodecError(f"need {n} bytes, only {self.remaining()} left")
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def read_u32(self) -> int:
        """Read an unsigned 32-bit little-endian integer."""
        return int.from_bytes(self.read(4), "little")

    def read_compact(self) -> int:
        """Read a compact-encoded integer."""
        first = self.read(1)[0]
        mode = first & 0b11
        if mode == 0b00:
            return first >> 2
        if mode == 0b01:
            return int.from_bytes(bytes([first]) + self.read(1), "little") >> 2
        if mode == 0b10:
            return int.from_bytes(bytes([first]) + self.read(3), "little") >> 2
        return int.from_bytes(self.read((first >> 2) + 4), "little")

    def read_bytes(self) -> bytes:
        """Read a compact-length-prefixed byte string."""
        return self.read(self.read_compact())

    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos


@dataclass(frozen=True)
class BlockData:
    """Opaque parachain block data."""

    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def encode(self) -> bytes:
        return encode_bytes(self.data)

    @classmethod
    def decode(cls, reader: Reader) -> "BlockData":
        return cls(reader.read_bytes())


@dataclass(frozen=True)
class OutgoingMessage:
    """A message posted by a parachain to another parachain."""

    target: int
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    def encode(self) -> bytes:
        return encode_u32(self.target) + encode_bytes(self.data)

    @classmethod
    def decode(cls, reader: Reader) -> "OutgoingMessage":
        target = reader.read_u32()
        return cls(target, reader.read_bytes())


@dataclass(frozen=True)
class Extrinsic:
    """Data produced by validating a parachain block: its outgoing messages."""

    outgoing_messages: tuple[OutgoingMessage, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "outgoing_messages", tuple(self.outgoing_messages))

    def encode(self) -> bytes:
        parts = [encode_compact(len(self.outgoing_messages))]
        parts.extend(message.encode() for message in self.outgoing_messages)
        return b"".join(parts)

    @classmethod
    def decode(cls, reader: Reader) -> "Extrinsic":
        count = reader.read_compact()
        return cls(tuple(OutgoingMessage.decode(reader) for _ in range(count)))