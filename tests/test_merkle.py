import pytest

from relaychain.merkle import InvalidProof, ordered_root, prove, verify


def _values(n):
    return [bytes([i]) * (i + 1) for i in range(n)]


@pytest.mark.parametrize("n", [1, 2, 3, 5, 8, 10, 13])
def test_every_index_verifies(n):
    values = _values(n)
    root = ordered_root(values)
    for index, value in enumerate(values):
        assert verify(root, prove(values, index), index) == value


def test_root_is_32_bytes_and_deterministic():
    values = _values(4)
    assert len(ordered_root(values)) == 32
    assert ordered_root(values) == ordered_root(list(values))


def test_root_depends_on_order():
    values = _values(4)
    assert ordered_root(values) != ordered_root(list(reversed(values)))


def test_empty_root_differs_from_single():
    assert ordered_root([]) != ordered_root([b""])


def test_tampered_value_rejected():
    values = _values(5)
    root = ordered_root(values)
    proof = prove(values, 2)
    proof[2] = b"tampered"
    with pytest.raises(InvalidProof):
        verify(root, proof, 2)


def test_tampered_sibling_rejected():
    values = _values(5)
    root = ordered_root(values)
    proof = prove(values, 1)
    proof[3] = bytes(32)
    with pytest.raises(InvalidProof):
        verify(root, proof, 1)


def test_wrong_root_rejected():
    values = _values(5)
    with pytest.raises(InvalidProof):
        verify(ordered_root(_values(6)), prove(values, 0), 0)


def test_wrong_index_rejected():
    values = _values(5)
    root = ordered_root(values)
    with pytest.raises(InvalidProof):
        verify(root, prove(values, 1), 3)


def test_out_of_bounds_index():
    values = _values(5)
    root = ordered_root(values)
    with pytest.raises(IndexError):
        verify(root, prove(values, 0), 5)


def test_extra_node_rejected():
    values = _values(4)
    root = ordered_root(values)
    proof = prove(values, 0) + [bytes(32)]
    with pytest.raises(InvalidProof):
        verify(root, proof, 0)


def test_malformed_proof_rejected():
    with pytest.raises(InvalidProof):
        verify(ordered_root(_values(2)), [b"\x01"], 0)


def test_prove_out_of_range():
    with pytest.raises(IndexError):
        prove(_values(3), 3)