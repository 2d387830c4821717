"""Implementations of the hpcbench CLI commands."""
