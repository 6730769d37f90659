[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kalamari"
version = "0.0.2"
description = "Static security analysis helpers: CSP, SRI, DOM clobbering, DOM sinks and XSS payloads."
requires-python = ">=3.10"
dependencies = []
keywords = ["security", "xss", "csp", "sri", "pentest", "dom-clobbering"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Information Technology",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Internet :: WWW/HTTP",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["kalamari"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
