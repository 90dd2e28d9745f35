"""
common package

Shared constants for the Shrdlite planner.
"""
