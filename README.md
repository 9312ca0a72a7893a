# relaychain

Pure-Python building blocks for a relay chain that keeps parachain data
available and checks the candidates that parachains submit.

## Modules

- `relaychain.primitives`: the data types `BlockData`, `OutgoingMessage` and
  `Extrinsic`, with a compact binary encoding (`encode_u32`, `encode_compact`,
  `encode_bytes` and the sequential `Reader`). `blake2_256` gives the 32-byte
  BLAKE2b digest. Decoding errors raise `CodecError`.
- `relaychain.wrapped_shard`: `WrappedShard`, a byte buffer padded to an even
  length that can also be viewed as two-byte words.
- `relaychain.reed_solomon`: `ReedSolomon`, a systematic erasure code over
  GF(2^16). `encode` appends parity shards to the data shards. `reconstruct`
  fills in the shards that are missing (`None`). It raises `TooFewShards`,
  `TooManyShards` or `InvalidShardFlags`, all subclasses of `ReedSolomonError`.
- `relaychain.merkle`: `ordered_root` commits to an ordered list of values.
  `prove` builds a proof for one index. `verify` checks it and returns the
  value, raising `InvalidProof` on a bad proof.
- `relaychain.store`: `Store` is the SQLite-backed availability store. It
  keeps `Data` (block data and an optional extrinsic) for each relay parent and
  candidate. `candidates_finalized` drops what was not finalized.
  `Store.in_memory()` opens a store that lives in memory only. A store can be
  used as a context manager.
- `relaychain.collation`: `egress_trie_root` and `check_and_compute_extrinsic`
  check outgoing messages against a candidate's egress roots. `Externalities`
  collects the messages a parachain posts and refuses a message to itself.
- `relaychain.groups`: `make_group_info` turns a `DutyRoster` of `Chain`
  duties into `GroupInfo` per parachain and the local `LocalDuty`.
- `relaychain.chain_spec`: `ChainSpec` maps command-line chain names such as
  `dev`, `local`, `alex` or `staging` to a predefined chain.

## Installation

```
pip install .
```

The package has no runtime dependencies.

## Example

```python
from relaychain.reed_solomon import ReedSolomon
from relaychain.merkle import ordered_root, prove, verify
from relaychain.primitives import BlockData, Extrinsic
from relaychain.store import Data, Store

coder = ReedSolomon(2, 2)
shards = coder.encode([b"abcd", b"efgh"])
assert coder.reconstruct([None, shards[1], None, shards[3]]) == shards

values = [b"a", b"b", b"c"]
root = ordered_root(values)
assert verify(root, prove(values, 1), 1) == b"b"

relay_parent = bytes([1] * 32)
candidate = bytes([2] * 32)
with Store.in_memory() as store:
    store.make_available(
        Data(relay_parent, 5, candidate, BlockData(b"\x01\x02\x03"), Extrinsic())
    )
    assert store.block_data(relay_parent, candidate) == BlockData(b"\x01\x02\x03")
    store.candidates_finalized(relay_parent, [])
    assert store.block_data(relay_parent, candidate) is None
```

## What this package does not do

It is a library only. It has no command-line program, runs no node and does
no networking. It does not split block data into one chunk per validator or
build per-chunk proofs by itself. `ReedSolomon` and `relaychain.merkle` give
the pieces for that. It also does not order ingress queues for a collator and
does not time block proposals.

## Tests

```
pip install .[test]
pytest
```