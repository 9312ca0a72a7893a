"""Validator-side checks of collations: egress roots and posted messages."""

from __future__ import annotations

import itertools
from typing import Iterable, Sequence

from relaychain.merkle import ordered_root
from relaychain.primitives import Extrinsic, OutgoingMessage


class CollationError(Exception):
    """Base class for errors validating a collation."""


class InactiveParachain(CollationError):
    """Collated for an inactive parachain."""

    def __init__(self, para_id: int) -> None:
        super().__init__(f"Collated for inactive parachain: {para_id}")
        self.para_id = para_id


class EgressRootMismatch(CollationError):
    """An egress route had an unexpected root."""

    def __init__(self, para_id: int, expected: bytes, got: bytes) -> None:
        super().__init__(
            f"Got unexpected egress route to {para_id}. "
            f"(expected: {expected.hex()}, got {got.hex()})"
        )
        self.para_id = para_id
        self.expected = expected
        self.got = got


class MissingEgressRoute(CollationError):
    """An egress route is missing or extra."""

    def __init__(self, expected: int | None, got: int | None) -> None:
        super().__init__(f"Missing or extra egress route. (expected: {expected}, got {got})")
        self.expected = expected
        self.got = got


class WrongHeadData(CollationError):
    """Parachain validation produced wrong head data."""

    def __init__(self, expected: bytes, got: bytes) -> None:
        super().__init__(
            f"Parachain validation produced wrong head data "
            f"(expected: {list(expected)}, got {list(got)})"
        )
        self.expected = expected
        self.got = got


class CannotPostMessage(Exception):
    """A parachain tried to post a message it may not post."""


def egress_trie_root(messages: Iterable[bytes]) -> bytes:
    """Compute the egress root for an ordered set of message payloads."""
    return ordered_root(bytes(m) for m in messages)


def check_and_compute_extrinsic(
    outgoing: Iterable[OutgoingMessage],
    expected_egress_roots: Sequence[tuple[int, bytes]],
) -> Extrinsic:
    """Check outgoing messages against the expected egress roots.

    Messages are stably sorted by target; each target's batch must match the
    next expected root, and no expected roots may be left over.
    """
    ordered = sorted(outgoing, key=lambda message: message.target)
    expected = iter(expected_egress_roots)

    for target, batch in itertools.groupby(ordered, key=lambda message: message.target):
        entry = next(expected, None)
        if entry is None:
            raise MissingEgressRoute(target, None)
        expected_id, expected_root = entry
        if expected_id != target:
            raise MissingEgressRoute(target, expected_id)
        computed = egress_trie_root(message.data for message in batch)
        if computed != bytes(expected_root):
            raise EgressRootMismatch(target, bytes(expected_root), computed)

    leftover = next(expected, None)
    if leftover is not None:
        raise MissingEgressRoute(None, leftover[0])

    return Extrinsic(tuple(ordered))


class Externalities:
    """Collects the messages a parachain posts while its block is validated."""

    def __init__(self, parachain_index: int) -> None:
        self.parachain_index = parachain_index
        self.outgoing: list[OutgoingMessage] = []

    def post_message(self, target: int, data: bytes) -> None:
        """Record a message to another parachain."""
        if target == self.parachain_index:
            raise CannotPostMessage("posted message to self")
        self.outgoing.append(OutgoingMessage(target, bytes(data)))

    def final_checks(self, egress_queue_roots: Sequence[tuple[int, bytes]]) -> Extrinsic:
        """Check the posted messages against the candidate's egress roots."""
        return check_and_compute_extrinsic(self.outgoing, egress_queue_roots)