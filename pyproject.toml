[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "templscan"
version = "0.1.0"
description = "Building blocks for template-driven DNS, file and HTTP scanning requests"
requires-python = ">=3.10"
keywords = ["scanner", "templates", "dns", "http", "raw-request", "security"]
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
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "dnspython",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["templscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
