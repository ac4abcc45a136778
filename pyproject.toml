[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jtagkit"
version = "0.1.0"
description = "FPGA bitstream file handling, JTAG cable and device databases, and navigation math helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["jtag", "fpga", "xilinx", "bitstream", "mcs", "intel-hex", "quaternion", "navigation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bitparse = "jtagkit.bitparse:main"

[tool.hatch.build.targets.wheel]
packages = ["jtagkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
