"""Taskboard command-line interface."""
