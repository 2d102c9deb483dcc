"""Example programs built on dynacoll containers."""
