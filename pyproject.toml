[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "a2squery"
version = "0.1.0"
description = "Steam A2S server query client with Arma 3 / DayZ server browser protocol support"
requires-python = ">=3.10"
dependencies = []
keywords = ["steam", "a2s", "server-query", "arma3", "dayz", "game-server", "udp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
a2squery = "a2squery.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["a2squery"]

[tool.pytest.ini_options]
addopts = "-ra"
