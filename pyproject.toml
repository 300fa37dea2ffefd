[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "epos"
version = "0.1.0"
description = "Teaching-kernel building blocks: bitmaps, frame and address-space allocators, demand paging, a keyboard decoder, a text console and FAT on-disk structures"
requires-python = ">=3.10"
dependencies = []
keywords = ["kernel", "bitmap", "paging", "allocator", "keyboard", "fat", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["epos"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
