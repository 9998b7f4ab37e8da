"""Generators that turn mirrored upstream metadata into launcher-format files."""

from .launcher import generate_minecraft

__all__ = ["generate_minecraft"]
