[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proprf"
version = "0.1.0"
description = "Mersenne-61 and 384-bit field arithmetic, GF(2^128) multiplication, Keccak-p[1600] and authenticated-share helpers for two-party protocols"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "oprf",
    "zero-knowledge",
    "mersenne-prime",
    "gf128",
    "keccak",
    "edabits",
    "memory-checking",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["proprf"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
