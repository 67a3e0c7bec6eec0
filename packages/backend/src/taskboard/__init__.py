"""Taskboard — task tracking API with JWT accounts.

REST backend (FastAPI) for registering accounts, logging in and keeping
per-user task lists, plus a small Python client and CLI that talk to it.
"""

__version__ = "0.1.0"
