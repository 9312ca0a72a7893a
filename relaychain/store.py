"""Persistent store for parachain data that must be kept available."""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
from dataclasses import dataclass
from typing import Iterable

from relaychain.primitives import (
    BlockData,
    CodecError,
    Extrinsic,
    Reader,
    encode_compact,
)

_log = logging.getLogger("availability")

_DATA = "data"
_META = "meta"
_HASH_LEN = 32


def _check_hash(value: bytes, name: str) -> bytes:
    value = bytes(value)
    if len(value) != _HASH_LEN:
        raise ValueError(f"{name} must be {_HASH_LEN} bytes, got {len(value)}")
    return value


def _block_data_key(relay_parent: bytes, candidate_hash: bytes) -> bytes:
    return relay_parent + candidate_hash + b"\x00"


def _extrinsic_key(relay_parent: bytes, candidate_hash: bytes) -> bytes:
    return relay_parent + candidate_hash + b"\x01"


def _encode_hashes(hashes: list[bytes]) -> bytes:
    return encode_compact(len(hashes)) + b"".join(hashes)


def _decode_hashes(raw: bytes) -> list[bytes]:
    reader = Reader(raw)
    count = reader.read_compact()
    hashes = [reader.read(_HASH_LEN) for _ in range(count)]
    if reader.remaining():
        raise CodecError("trailing bytes after candidate list")
    return hashes


@dataclass(frozen=True)
class Data:
    """Some data to keep available for a candidate."""

    relay_parent: bytes
    parachain_id: int
    candidate_hash: bytes
    block_data: BlockData
    extrinsic: Extrinsic | None = None


class Store:
    """Handle to the availability store, backed by SQLite."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        location = os.fspath(path)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(location, check_same_thread=False)
            with self._conn:
                for table in (_DATA, _META):
                    self._conn.execute(
                        f"CREATE TABLE IF NOT EXISTS {table} "
                        "(key BLOB PRIMARY KEY, value BLOB NOT NULL)"
                    )
        except sqlite3.Error as exc:
            raise OSError(f"cannot open database at {location!r}: {exc}") from exc

    @classmethod
    def in_memory(cls) -> "Store":
        """Create a store held in memory only."""
        return cls(":memory:")

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying database."""
        with self._lock:
            self._conn.close()

    def _get(self, table: str, key: bytes) -> bytes | None:
        try:
            row = self._conn.execute(
                f"SELECT value FROM {table} WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            _log.warning("Error reading from availability store: %r", exc)
            return None
        return None if row is None else bytes(row[0])

    def _candidates_at(self, relay_parent: bytes) -> list[bytes]:
        raw = self._get(_META, relay_parent)
        return _decode_hashes(raw) if raw is not None else []

    def make_available(self, data: Data) -> None:
        """Make some data available provisionally."""
        relay_parent = _check_hash(data.relay_parent, "relay_parent")
        candidate_hash = _check_hash(data.candidate_hash, "candidate_hash")
        with self._lock:
            candidates = self._candidates_at(relay_parent)
            candidates.append(candidate_hash)
            puts = [
                (_META, relay_parent, _encode_hashes(candidates)),
                (
                    _DATA,
                    _block_data_key(relay_parent, candidate_hash),
                    data.block_data.encode(),
                ),
            ]
            if data.extrinsic is not None:
                puts.append(
                    (
                        _DATA,
                        _extrinsic_key(relay_parent, candidate_hash),
                        data.extrinsic.encode(),
                    )
                )
            try:
                with self._conn:
                    for table, key, value in puts:
                        self._conn.execute(
                            f"INSERT OR REPLACE INTO {table} (key, value) VALUES (?, ?)",
                            (key, value),
                        )
            except sqlite3.Error as exc:
                raise OSError(f"failed to write to availability store: {exc}") from exc

    def candidates_finalized(
        self, parent: bytes, finalized_candidates: Iterable[bytes]
    ) -> None:
        """Drop data under ``parent`` for every candidate that was not finalized."""
        parent = _check_hash(parent, "parent")
        keep = {bytes(h) for h in finalized_candidates}
        with self._lock:
            candidates = self._candidates_at(parent)
            deletes = [(_META, parent)]
            for candidate_hash in candidates:
                if candidate_hash not in keep:
                    deletes.append((_DATA, _block_data_key(parent, candidate_hash)))
                    deletes.append((_DATA, _extrinsic_key(parent, candidate_hash)))
            try:
                with self._conn:
                    for table, key in deletes:
                        self._conn.execute(f"DELETE FROM {table} WHERE key = ?", (key,))
            except sqlite3.Error as exc:
                raise OSError(f"failed to write to availability store: {exc}") from exc

    def block_data(self, relay_parent: bytes, candidate_hash: bytes) -> BlockData | None:
        """Return the stored block data, or None if there is none."""
        key = _block_data_key(
            _check_hash(relay_parent, "relay_parent"),
            _check_hash(candidate_hash, "candidate_hash"),
        )
        with self._lock:
            raw = self._get(_DATA, key)
        return None if raw is None else BlockData.decode(Reader(raw))

    def extrinsic(self, relay_parent: bytes, candidate_hash: bytes) -> Extrinsic | None:
        """Return the stored extrinsic data, or None if there is none."""
        key = _extrinsic_key(
            _check_hash(relay_parent, "relay_parent"),
            _check_hash(candidate_hash, "candidate_hash"),
        )
        with self._lock:
            raw = self._get(_DATA, key)
        return None if raw is None else Extrinsic.decode(Reader(raw))