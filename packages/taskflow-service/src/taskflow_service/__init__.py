"""Taskflow - multi-tenant task and project management service."""

__version__ = "0.1.0"
