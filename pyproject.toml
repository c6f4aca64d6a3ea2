[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vibestation"
version = "0.1.0"
description = "Message transformation pipelines configured with a small line-oriented scripting language"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["pipeline", "transform", "jsonpath", "gzip", "base64", "filter"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
vibestation = "vibestation.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["vibestation"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
