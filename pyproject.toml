[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nsbox"
version = "0.1.0"
description = "A minimal Linux container runtime built on namespaces and pivot_root"
requires-python = ">=3.12"
dependencies = []
keywords = ["container", "namespaces", "linux", "runtime", "pivot_root"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
nsbox = "nsbox.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["nsbox"]

[tool.pytest.ini_options]
addopts = "-ra"
