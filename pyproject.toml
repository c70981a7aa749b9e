[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mysticeti"
version = "0.1.0"
description = "Building blocks for a DAG-based consensus validator and its benchmark orchestrator: block types, latency histograms, transaction load, fault schedules and cloud instance clients."
requires-python = ">=3.10"
keywords = ["consensus", "dag", "benchmark", "orchestrator", "byzantine", "histogram"]
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
    "Topic :: System :: Distributed Computing",
]
dependencies = [
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["mysticeti"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
