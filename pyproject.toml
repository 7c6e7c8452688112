[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sonorpy"
version = "2.0.0"
description = "An asynchronous library for controlling Sonos speakers over UPnP"
requires-python = ">=3.10"
keywords = ["sonos", "async", "audio", "upnp", "ssdp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
    "Topic :: Home Automation",
]
dependencies = [
    "httpx>=0.24",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
    "pytest-asyncio>=0.21",
    "respx>=0.20",
]

[project.scripts]
sonorpy = "sonorpy.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sonorpy"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
