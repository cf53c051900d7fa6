[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chainlab"
version = "0.1.0"
description = "Small hash-linked blockchain toolkit: SHA-256 hashing, simple blocks, a validated ledger and proof-of-work mining"
requires-python = ">=3.10"
dependencies = []
keywords = ["blockchain", "sha256", "proof-of-work", "mining", "ledger", "hashing"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chainlab-hash = "chainlab.hashing:main"
chainlab-basic = "chainlab.basic:main"
chainlab-ledger = "chainlab.ledger:main"
chainlab-mining = "chainlab.mining:main"

[tool.hatch.build.targets.wheel]
packages = ["chainlab"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
