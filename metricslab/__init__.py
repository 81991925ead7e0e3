"""Demonstration service recording tagged request counters."""
