"""Reed-Solomon coding, merkle proofs, availability storage, collation checks and validator groups for a relay chain."""

__version__ = "0.1.0"