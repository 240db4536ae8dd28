[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blockytui"
version = "0.1.0"
description = "Terminal dashboard for monitoring and controlling a Blocky DNS server"
requires-python = ">=3.10"
keywords = ["blocky", "dns", "tui", "terminal", "ad-blocking", "dashboard"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "httpx",
    "dnspython",
    "rich",
    "blessed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[project.scripts]
blocky-tui = "blockytui.app:main"

[tool.hatch.build.targets.wheel]
packages = ["blockytui"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
