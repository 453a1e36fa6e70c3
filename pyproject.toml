[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rakudict"
version = "0.3.0"
description = "Japanese kana-kanji dictionaries: compact binary dictionary builder and reader, SKK dictionary parser, user dictionary and merged lookup"
requires-python = ">=3.11"
dependencies = [
    "tomli-w",
]
keywords = ["japanese", "ime", "dictionary", "skk", "mozc", "kana-kanji"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Natural Language :: Japanese",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
rakudict-build = "rakudict.builder:main"

[tool.hatch.build.targets.wheel]
packages = ["rakudict"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
