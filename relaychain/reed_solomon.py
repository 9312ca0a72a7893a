"""Systematic Reed-Solomon erasure code over GF(2^16)."""

from __future__ import annotations

import functools
from typing import Sequence

from relaychain.wrapped_shard import WrappedShard

_POLY = 0x1100B
FIELD_ORDER = 1 << 16
_GROUP = FIELD_ORDER - 1


class ReedSolomonError(Exception):
    """Raised when shards cannot be encoded or reconstructed."""


class TooFewShards(ReedSolomonError):
    """Fewer shards are present than are needed."""


class TooManyShards(ReedSolomonError):
    """More shards were given than the code has."""


class InvalidShardFlags(ReedSolomonError):
    """The shard list does not line up with the code's shard count."""


@functools.cache
def _tables() -> tuple[list[int], list[int]]:
    exp = [0] * (2 * _GROUP)
    log = [0] * FIELD_ORDER
    x = 1
    for power in range(_GROUP):
        exp[power] = x
        log[x] = power
        x <<= 1
        if x & FIELD_ORDER:
            x ^= _POLY
    exp[_GROUP:] = exp[:_GROUP]
    return exp, log


def _mul(a: int, b: int) -> int:
    if not a or not b:
        return 0
    exp, log = _tables()
    return exp[log[a] + log[b]]


def _inv(a: int) -> int:
    if not a:
        raise ZeroDivisionError("zero has no inverse")
    exp, log = _tables()
    return exp[(_GROUP - log[a]) % _GROUP]


def _pow(a: int, n: int) -> int:
    if n == 0:
        return 1
    if a == 0:
        return 0
    exp, log = _tables()
    return exp[(log[a] * n) % _GROUP]


def _invert(matrix: list[list[int]]) -> list[list[int]]:
    size = len(matrix)
    aug = [
        list(row) + [int(col == r) for col in range(size)]
        for r, row in enumerate(matrix)
    ]
    for col in range(size):
        pivot = next((r for r in range(col, size) if aug[r][col]), None)
        if pivot is None:
            raise ReedSolomonError("singular matrix")
        aug[col], aug[pivot] = aug[pivot], aug[col]
        scale = _inv(aug[col][col])
        pivot_row = [_mul(v, scale) for v in aug[col]]
        aug[col] = pivot_row
        for r, row in enumerate(aug):
            factor = row[col]
            if r != col and factor:
                aug[r] = [a ^ _mul(factor, b) for a, b in zip(row, pivot_row)]
    return [row[size:] for row in aug]


def _combine(coefficients: Sequence[int], word_lists: Sequence[list[int]], length: int) -> list[int]:
    exp, log = _tables()
    out = [0] * length
    for coefficient, words in zip(coefficients, word_lists):
        if not coefficient:
            continue
        lc = log[coefficient]
        out = [o ^ (exp[lc + log[w]] if w else 0) for o, w in zip(out, words)]
    return out


def _to_words(data: bytes) -> list[int]:
    return [(hi << 8) | lo for hi, lo in WrappedShard(data).words()]


def _from_words(words: list[int]) -> bytes:
    return WrappedShard.from_words((w >> 8, w & 0xFF) for w in words).to_bytes()


def _uniform(shards: Sequence[bytes]) -> int:
    lengths = {len(s) for s in shards}
    if len(lengths) != 1:
        raise ReedSolomonError("shards are not of uniform length")
    (length,) = lengths
    if length == 0:
        raise ReedSolomonError("shards are empty")
    if length % 2:
        raise ReedSolomonError("shard length must be even")
    return length


class ReedSolomon:
    """An erasure code with ``data_shards`` data and ``parity_shards`` parity shards."""

    def __init__(self, data_shards: int, parity_shards: int) -> None:
        if data_shards < 1:
            raise ReedSolomonError("at least one data shard is needed")
        if parity_shards < 0:
            raise ReedSolomonError("parity shard count must not be negative")
        if data_shards + parity_shards > FIELD_ORDER:
            raise ReedSolomonError("too many shards for the field")
        self.data_shards = data_shards
        self.parity_shards = parity_shards
        self.total_shards = data_shards + parity_shards
        self._parity_rows = self._build_parity_rows()

    def _build_parity_rows(self) -> list[list[int]]:
        if not self.parity_shards:
            return []
        d = self.data_shards
        top_inverse = _invert([[_pow(r, c) for c in range(d)] for r in range(d)])
        rows = []
        for point in range(d, self.total_shards):
            vander = [_pow(point, c) for c in range(d)]
            rows.append(
                [
                    functools.reduce(
                        lambda acc, pair: acc ^ _mul(*pair),
                        zip(vander, (row[c] for row in top_inverse)),
                        0,
                    )
                    for c in range(d)
                ]
            )
        return rows

    def _row(self, index: int) -> list[int]:
        if index < self.data_shards:
            return [int(c == index) for c in range(self.data_shards)]
        return self._parity_rows[index - self.data_shards]

    def encode(self, shards: Sequence[bytes | WrappedShard]) -> list[bytes]:
        """Return the data shards followed by the parity shards computed from them."""
        data = [bytes(s) for s in shards]
        if len(data) < self.data_shards:
            raise TooFewShards(f"expected {self.data_shards} data shards, got {len(data)}")
        if len(data) > self.data_shards:
            raise TooManyShards(f"expected {self.data_shards} data shards, got {len(data)}")
        length = _uniform(data) // 2
        words = [_to_words(s) for s in data]
        parity = [_from_words(_combine(row, words, length)) for row in self._parity_rows]
        return data + parity

    def reconstruct(self, shards: Sequence[bytes | WrappedShard | None]) -> list[bytes]:
        """Fill in missing (None) shards; return all shards in order."""
        shards = list(shards)
        if len(shards) > self.total_shards:
            raise TooManyShards(f"expected {self.total_shards} shards, got {len(shards)}")
        if len(shards) < self.total_shards:
            raise InvalidShardFlags(f"expected {self.total_shards} shards, got {len(shards)}")
        present = [(i, bytes(s)) for i, s in enumerate(shards) if s is not None]
        if len(present) < self.data_shards:
            raise TooFewShards(
                f"need {self.data_shards} shards present, have {len(present)}"
            )
        length = _uniform([s for _, s in present]) // 2
        if len(present) == self.total_shards:
            return [s for _, s in present]

        chosen = present[: self.data_shards]
        decode = _invert([self._row(i) for i, _ in chosen])
        chosen_words = [_to_words(s) for _, s in chosen]
        data_words = [_combine(row, chosen_words, length) for row in decode]

        by_index = dict(present)
        result = []
        for index in range(self.total_shards):
            if index in by_index:
                result.append(by_index[index])
            elif index < self.data_shards:
                result.append(_from_words(data_words[index]))
            else:
                result.append(_from_words(_combine(self._row(index), data_words, length)))
        return result