"""A four-track cassette recorder with synthesizer, drum sequencer and mixer."""

__version__ = "0.2.0"