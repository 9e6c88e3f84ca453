"""Typer command groups for hostprep."""
