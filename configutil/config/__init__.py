"""
Configuration loading and validation for service settings.

Provides the .env file loader, the settings builder with its precedence rules,
and the exception hierarchy raised when resolution fails.
"""
