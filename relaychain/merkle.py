"""Merkle commitments to an ordered list of values, with per-index proofs.

A proof is a list of byte strings: the leaf count and the proven index (each
as 4 little-endian bytes), the value itself, then the sibling hashes from the
leaf upwards.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from relaychain.primitives import blake2_256, encode_u32

_EMPTY = bytes(32)


class InvalidProof(ValueError):
    """Raised when a proof does not match the root or the queried index."""


def _leaf(index: int, value: bytes) -> bytes:
    return blake2_256(b"\x00" + encode_u32(index) + value)


def _node(left: bytes, right: bytes) -> bytes:
    return blake2_256(b"\x01" + left + right)


def _seal(count: int, top: bytes) -> bytes:
    return blake2_256(b"\x02" + encode_u32(count) + top)


def _levels(leaves: list[bytes]) -> list[list[bytes]]:
    levels = [leaves]
    while len(levels[-1]) > 1:
        current = levels[-1]
        pairs = itertools_pairs(current)
        levels.append([_node(a, b) if b is not None else a for a, b in pairs])
    return levels


def itertools_pairs(items: list[bytes]) -> list[tuple[bytes, bytes | None]]:
    """Group items into consecutive pairs, the last possibly alone."""
    evens = items[0::2]
    odds: list[bytes | None] = list(items[1::2])
    odds.extend([None] * (len(evens) - len(odds)))
    return list(zip(evens, odds))


def ordered_root(values: Iterable[bytes]) -> bytes:
    """Return the 32-byte root committing to ``values`` in order."""
    leaves = [_leaf(i, bytes(v)) for i, v in enumerate(values)]
    top = _levels(leaves)[-1][0] if leaves else _EMPTY
    return _seal(len(leaves), top)


def prove(values: Sequence[bytes], index: int) -> list[bytes]:
    """Return a proof that ``values[index]`` is committed to by the root."""
    values = [bytes(v) for v in values]
    if not 0 <= index < len(values):
        raise IndexError("index out of range")
    levels = _levels([_leaf(i, v) for i, v in enumerate(values)])
    proof = [encode_u32(len(values)), encode_u32(index), values[index]]
    pos = index
    for level in levels[:-1]:
        sibling = pos ^ 1
        if sibling < len(level):
            proof.append(level[sibling])
        pos //= 2
    return proof


def verify(root: bytes, proof: Sequence[bytes], index: int) -> bytes:
    """Check ``proof`` against ``root`` and return the value at ``index``.

    Raises InvalidProof if the proof is malformed, does not match the root or
    proves a different index; IndexError if it shows ``index`` is beyond the end.
    """
    nodes = [bytes(n) for n in proof]
    if len(nodes) < 3 or len(nodes[0]) != 4 or len(nodes[1]) != 4:
        raise InvalidProof("malformed proof")
    count = int.from_bytes(nodes[0], "little")
    proven = int.from_bytes(nodes[1], "little")
    value = nodes[2]
    if proven >= count:
        raise InvalidProof("proof index beyond its own count")

    siblings = iter(nodes[3:])
    digest = _leaf(proven, value)
    pos, size = proven, count
    while size > 1:
        if pos ^ 1 < size:
            sibling = next(siblings, None)
            if sibling is None or len(sibling) != 32:
                raise InvalidProof("missing or malformed sibling")
            digest = _node(digest, sibling) if pos % 2 == 0 else _node(sibling, digest)
        pos //= 2
        size = (size + 1) // 2
    if next(siblings, None) is not None:
        raise InvalidProof("extra nodes in proof")
    if _seal(count, digest) != bytes(root):
        raise InvalidProof("proof does not match root")
    if not 0 <= index < count:
        raise IndexError("index out of range")
    if index != proven:
        raise InvalidProof("proof is for a different index")
    return value