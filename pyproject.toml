[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netlistshell"
version = "0.1.0"
description = "Command shell and parser for exploring structural Verilog netlists: ports, cells, nets and pin connections"
requires-python = ">=3.10"
dependencies = []
keywords = ["verilog", "netlist", "eda", "shell", "parser"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
netlistshell = "netlistshell.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["netlistshell"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
