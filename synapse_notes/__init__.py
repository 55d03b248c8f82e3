"""Editing-session controller for a local Markdown note manager."""

__version__ = "0.1.0"
