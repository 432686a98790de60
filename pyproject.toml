[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chanbench"
version = "0.2.0"
description = "Throughput benchmarks for bounded async message channels under different event-loop runtimes"
requires-python = ">=3.10"
keywords = ["benchmark", "channel", "asyncio", "trio", "anyio", "throughput", "mpsc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Framework :: AnyIO",
    "Framework :: AsyncIO",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
]
dependencies = [
    "anyio>=4.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
chanbench = "chanbench.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["chanbench"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
