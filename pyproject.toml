[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tapedeck"
version = "0.2.0"
description = "Terminal-based 4-track cassette recorder with synth, drum sequencer and mixer"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "audio",
    "recorder",
    "multitrack",
    "cassette",
    "synthesizer",
    "drum-machine",
    "sequencer",
    "terminal",
    "curses",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Capture/Recording",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
    "Topic :: Multimedia :: Sound/Audio :: Mixers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tapedeck = "tapedeck.main:main"

[tool.hatch.build.targets.wheel]
packages = ["tapedeck"]

[tool.pytest.ini_options]
addopts = "-ra"
