"""
configutil – layered configuration loading for service processes.

Resolves a fixed set of service settings from an optional .env file, the
process environment, and explicit in-process overrides into a single frozen
Settings object.
"""
