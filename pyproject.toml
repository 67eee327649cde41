[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "workhours"
version = "0.1.0"
description = "HTTP service that counts working hours between two instants, skipping weekends and per-country holidays"
requires-python = ">=3.10"
keywords = ["work hours", "business hours", "holidays", "timezone", "http api"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "flask>=2.2",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
workhours = "workhours.app:main"

[tool.hatch.build.targets.wheel]
packages = ["workhours"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
