[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dseq"
version = "0.1.0"
description = "A sequencer application that orders transactions into blocks and writes them to a data stream, with a load generator for test networks"
requires-python = ">=3.10"
dependencies = []
keywords = ["sequencer", "consensus", "abci", "data-stream", "load-testing"]
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

[project.scripts]
dseq = "dseq.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dseq"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
