"""Helpers shared by the Polly command-line tools."""
