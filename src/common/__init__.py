"""Shared helpers (logging, HTTP, persistence) used across updaters and generators."""
