"""Deterministic global weather scheduler with broadcast state for game consumers."""
