"""Verdict backend: transcribe two partners, ask the model, return a verdict."""

__version__ = "1.0.0"
