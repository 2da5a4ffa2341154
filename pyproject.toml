[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bsetools"
version = "0.1.0"
description = "Readers for quantum chemistry basis set file formats and converters for basis set references."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "quantum chemistry",
    "basis sets",
    "computational chemistry",
    "gaussian",
    "nwchem",
    "turbomole",
    "molpro",
    "bibtex",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Chemistry",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bsetools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
