"""Typed views over upstream metadata and the launcher's canonical schema."""
