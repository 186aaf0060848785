[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "treasurehunt"
version = "0.1.0"
description = "Manage treasure hunts stored on disk, with a monitor process, an interactive hub and score calculation"
requires-python = ">=3.10"
dependencies = []
keywords = ["treasure hunt", "game", "signals", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
treasure-manager = "treasurehunt.manager_cli:main"
treasure-scores = "treasurehunt.scores:main"
treasure-monitor = "treasurehunt.monitor:main"
treasure-hub = "treasurehunt.hub:main"

[tool.setuptools.packages.find]
include = ["treasurehunt*"]

[tool.pytest.ini_options]
addopts = "-ra"
