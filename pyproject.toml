[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xlsxsheet"
version = "0.1.0"
description = "Worksheet model for the Office Open XML spreadsheet format: cells, formulas, layout, and reading and writing sheet XML."
requires-python = ">=3.10"
dependencies = []
keywords = ["xlsx", "spreadsheet", "excel", "ooxml", "worksheet"]
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
    "Topic :: Office/Business :: Financial :: Spreadsheet",
    "Topic :: File Formats",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["xlsxsheet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
