[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsdkit"
version = "0.6.0"
description = "Reader for Lingvo LSD dictionaries: headings, articles, annotations and embedded overlay files"
requires-python = ">=3.10"
dependencies = []
keywords = ["lingvo", "lsd", "dsl", "dictionary", "huffman", "zipcrypto"]
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
    "Topic :: Text Processing :: Linguistic",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lsdkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
