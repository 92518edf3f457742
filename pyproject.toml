[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ctf01d"
version = "0.1.0"
description = "Core of a CTF game-tracking service: data models, database repositories, schema migrations and identicon avatars"
requires-python = ">=3.10"
dependencies = []
keywords = ["ctf", "capture-the-flag", "scoreboard", "avatar", "identicon", "migrations"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Database",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ctf01d-create-migration = "ctf01d.create_migration:main"

[tool.hatch.build.targets.wheel]
packages = ["ctf01d"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
