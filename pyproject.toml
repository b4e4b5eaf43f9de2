[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "librarydesk"
version = "0.1.0"
description = "Terminal library desk: book titles, copies, readers and loans"
requires-python = ">=3.10"
keywords = ["library", "loans", "catalogue", "terminal", "readers"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Vietnamese",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
]
dependencies = [
    "blessed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
librarydesk = "librarydesk.app:main"

[tool.hatch.build.targets.wheel]
packages = ["librarydesk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
