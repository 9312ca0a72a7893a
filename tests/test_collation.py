import pytest

from relaychain.collation import (
    CannotPostMessage,
    CollationError,
    EgressRootMismatch,
    Externalities,
    MissingEgressRoute,
    check_and_compute_extrinsic,
    egress_trie_root,
)
from relaychain.primitives import Extrinsic, OutgoingMessage

MESSAGES = [
    OutgoingMessage(3, bytes([1, 1, 1])),
    OutgoingMessage(1, bytes([1, 2, 3])),
    OutgoingMessage(2, bytes([4, 5, 6])),
    OutgoingMessage(1, bytes([7, 8, 9])),
]

ROOT_1 = egress_trie_root([bytes([1, 2, 3]), bytes([7, 8, 9])])
ROOT_2 = egress_trie_root([bytes([4, 5, 6])])
ROOT_3 = egress_trie_root([bytes([1, 1, 1])])


def test_egress_roots_ok_sorted_stably():
    extrinsic = check_and_compute_extrinsic(
        MESSAGES, [(1, ROOT_1), (2, ROOT_2), (3, ROOT_3)]
    )
    assert extrinsic == Extrinsic(
        (
            OutgoingMessage(1, bytes([1, 2, 3])),
            OutgoingMessage(1, bytes([7, 8, 9])),
            OutgoingMessage(2, bytes([4, 5, 6])),
            OutgoingMessage(3, bytes([1, 1, 1])),
        )
    )


def test_missing_root():
    with pytest.raises(MissingEgressRoute) as info:
        check_and_compute_extrinsic(MESSAGES, [(1, ROOT_1), (3, ROOT_3)])
    assert (info.value.expected, info.value.got) == (2, 3)


def test_extra_root():
    with pytest.raises(MissingEgressRoute) as info:
        check_and_compute_extrinsic(
            MESSAGES, [(1, ROOT_1), (2, ROOT_2), (3, ROOT_3), (4, bytes(32))]
        )
    assert (info.value.expected, info.value.got) == (None, 4)


def test_root_mismatch():
    with pytest.raises(EgressRootMismatch) as info:
        check_and_compute_extrinsic(MESSAGES, [(1, ROOT_2), (2, ROOT_1), (3, ROOT_3)])
    assert info.value.para_id == 1
    assert info.value.expected == ROOT_2
    assert info.value.got == ROOT_1


def test_messages_beyond_roots():
    with pytest.raises(MissingEgressRoute) as info:
        check_and_compute_extrinsic(MESSAGES, [(1, ROOT_1), (2, ROOT_2)])
    assert (info.value.expected, info.value.got) == (3, None)
    assert isinstance(info.value, CollationError)


def test_no_messages_no_roots():
    assert check_and_compute_extrinsic([], []) == Extrinsic()


def test_egress_root_depends_on_order():
    forward = egress_trie_root([b"a", b"b"])
    assert forward == egress_trie_root([b"a", b"b"])
    assert forward != egress_trie_root([b"b", b"a"])


def test_ext_rejects_local_message():
    ext = Externalities(5)
    ext.post_message(1, b"")
    with pytest.raises(CannotPostMessage):
        ext.post_message(5, b"")
    assert ext.outgoing == [OutgoingMessage(1, b"")]


def test_final_checks_uses_posted_messages():
    ext = Externalities(10)
    for message in MESSAGES:
        ext.post_message(message.target, message.data)
    extrinsic = ext.final_checks([(1, ROOT_1), (2, ROOT_2), (3, ROOT_3)])
    assert [m.target for m in extrinsic.outgoing_messages] == [1, 1, 2, 3]
    with pytest.raises(MissingEgressRoute):
        ext.final_checks([])