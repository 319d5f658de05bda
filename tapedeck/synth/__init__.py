"""Polyphonic synthesizer engines and voice allocation."""