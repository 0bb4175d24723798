[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitshell"
version = "0.1.0"
description = "Building blocks for an SSH front end to Git hosting: pkt-line scanning, SSH request payloads, key lines, logging and authentication rules"
requires-python = ">=3.10"
dependencies = []
keywords = ["git", "ssh", "pkt-line", "authorized_keys", "gitaly"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gitshell"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
