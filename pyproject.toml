[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fzmatch"
version = "0.59.0"
description = "Fuzzy and exact text matching with scoring, ANSI colour extraction, chunked item storage and query history"
requires-python = ">=3.10"
dependencies = []
keywords = ["fuzzy", "matching", "finder", "ansi", "search", "scoring", "history"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fzmatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
