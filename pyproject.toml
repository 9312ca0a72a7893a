[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "relaychain"
version = "0.1.0"
description = "Relay-chain building blocks: Reed-Solomon coding, merkle proofs, availability storage, collation checks and validator groups"
requires-python = ">=3.10"
dependencies = []
keywords = ["reed-solomon", "erasure-coding", "merkle", "parachain", "availability", "collation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["relaychain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
