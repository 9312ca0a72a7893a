"""Assignment of validators to parachain groups from a duty roster."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Sequence


class ConsensusError(Exception):
    """Base class for errors in the consensus process."""


def _show(value: object) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return repr(value)


class InvalidDutyRosterLength(ConsensusError):
    """The duty roster does not have one entry per authority."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"Invalid duty roster length: expected {expected}, got {got}")
        self.expected = expected
        self.got = got


class NotValidator(ConsensusError):
    """The local authority is not a validator at this block."""

    def __init__(self, authority_id: Hashable) -> None:
        super().__init__(
            f"Local account ID ({_show(authority_id)}) not a validator at this block."
        )
        self.authority_id = authority_id


@dataclass(frozen=True)
class Chain:
    """A validator's duty: the relay chain (no parachain id) or one parachain."""

    para_id: int | None = None

    @classmethod
    def relay(cls) -> "Chain":
        """The relay chain."""
        return cls()

    @classmethod
    def parachain(cls, para_id: int) -> "Chain":
        """The parachain with the given id."""
        return cls(para_id)

    @property
    def is_relay(self) -> bool:
        return self.para_id is None


@dataclass(frozen=True)
class DutyRoster:
    """The chain each validator, in authority order, is assigned to."""

    validator_duty: tuple[Chain, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "validator_duty", tuple(self.validator_duty))


@dataclass
class GroupInfo:
    """The authorities checking a parachain and the votes needed for validity."""

    validity_guarantors: set = field(default_factory=set)
    needed_validity: int = 0


@dataclass(frozen=True)
class LocalDuty:
    """The local authority's assignment."""

    validation: Chain


def make_group_info(
    roster: DutyRoster,
    authorities: Sequence[Hashable],
    local_id: Hashable,
) -> tuple[dict[int, GroupInfo], LocalDuty]:
    """Group authorities by parachain and find the local authority's duty.

    Each group needs a majority (rounded up) of its members for validity.
    """
    duties = roster.validator_duty
    if len(duties) != len(authorities):
        raise InvalidDutyRosterLength(len(authorities), len(duties))

    local_validation: Chain | None = None
    groups: dict[int, GroupInfo] = {}

    for authority, duty in zip(authorities, duties):
        if authority == local_id:
            local_validation = duty
        if not duty.is_relay:
            groups.setdefault(duty.para_id, GroupInfo()).validity_guarantors.add(authority)

    for group in groups.values():
        size = len(group.validity_guarantors)
        group.needed_validity = size // 2 + size % 2

    if local_validation is None:
        raise NotValidator(local_id)
    return groups, LocalDuty(local_validation)