"""Semester and subscription lifecycle engine for multi-hostel management."""

__version__ = "1.0.0"
