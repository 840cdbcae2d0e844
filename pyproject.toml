[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "thready"
version = "0.1.0"
description = "Small thread pools (blocking, spinning, lock-free and hybrid) and the task queues behind them"
requires-python = ">=3.10"
dependencies = []
keywords = ["thread pool", "threading", "concurrency", "queue", "ring buffer", "workers"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
thready-demo = "thready.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["thready"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
