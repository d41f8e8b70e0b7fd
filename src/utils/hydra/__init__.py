"""Hydra integration (callbacks)."""
