"""
Service layer: every lifecycle operation and its transaction boundary.
"""
