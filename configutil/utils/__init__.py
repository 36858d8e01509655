"""
Generic utility functions shared across modules.

Includes the environment lookup abstraction used to keep resolution testable.
"""
