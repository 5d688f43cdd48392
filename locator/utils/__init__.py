"""Logging, I/O, timing and visualization helpers."""
