[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "livebgconf"
version = "0.1.0"
description = "Configuration tool and client library for a live wallpaper daemon"
requires-python = ">=3.10"
dependencies = []
keywords = ["wallpaper", "live wallpaper", "desktop", "configuration", "tkinter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.gui-scripts]
livebgconf = "livebgconf.app:main"

[tool.setuptools.packages.find]
include = ["livebgconf*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
