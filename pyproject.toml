[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tetrakit"
version = "0.1.0"
description = "TETRA air-interface primitives: TEA keystream generators, HURDLE/TAA1, key store, CRC, scrambling, interleaving, puncturing and Viterbi decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["tetra", "tea1", "tea2", "tea3", "hurdle", "taa1", "viterbi", "crc", "radio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
    "Topic :: Communications :: Ham Radio",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["tetrakit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
