"""
Environment lookup abstractions for deterministic configuration resolution.

This module provides a simple, testable way to read environment variables via
an injected source object rather than calling os.environ directly. Resolution
code that depends on an EnvironmentSource can be exercised against a fixed
mapping in tests while production code passes the live process environment.
"""

import os
from typing import Mapping, Optional, Protocol


class EnvironmentSource(Protocol):
    """
    Abstract read-only environment protocol.

    **Conceptual**: An EnvironmentSource is any object that can answer the
    question "what is the value of variable KEY?" By depending on this
    abstraction instead of reading os.environ, settings resolution becomes
    deterministic: the same source always yields the same Settings.

    **Usage**: Consumers accept an EnvironmentSource (injected via constructor
    or function parameter) and call source.get(key) whenever they need a value.
    In production, pass a ProcessEnvironment; in tests, pass a StaticEnvironment.

    **Example**:
        def resolve(environ: EnvironmentSource):
            url = environ.get("DATABASE_URL") or "sqlite://"

        # In production:
        resolve(ProcessEnvironment())

        # In tests:
        resolve(StaticEnvironment({"DATABASE_URL": "postgres://test"}))
    """

    def get(self, key: str) -> Optional[str]:
        """
        Return the value of `key`, or None if it is not set.

        Args:
            key: Environment variable name.

        Returns:
            The variable's value as a string, or None.
        """
        ...


class ProcessEnvironment:
    """
    Environment source backed by the live process environment.

    **Conceptual**: Use this in production where configuration comes from
    variables injected by the shell, container runtime or orchestrator.
    Lookups go to os.environ at call time, so variables set after construction
    are visible.
    """

    def get(self, key: str) -> Optional[str]:
        """Return os.environ[key], or None if unset."""
        return os.environ.get(key)


class StaticEnvironment:
    """
    Environment source that serves a fixed mapping (for deterministic tests).

    **Conceptual**: StaticEnvironment "freezes" the environment to the values
    given at construction. The mapping is copied, so later changes to the
    caller's dict do not leak into lookups.

    **Usage**:
        environ = StaticEnvironment({
            "DATABASE_URL": "postgres://localhost/app",
            "AUTH_SERVICE_URL": "http://auth.local",
        })
        environ.get("DATABASE_URL")  # "postgres://localhost/app"
        environ.get("PORT")          # None
    """

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        """
        Initialize a StaticEnvironment.

        Args:
            values: Variables to expose. Defaults to an empty environment.
        """
        self._values = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        """Return the configured value for `key`, or None."""
        return self._values.get(key)


def get_process_environment() -> EnvironmentSource:
    """
    Factory function to create a ProcessEnvironment instance.

    Returns:
        ProcessEnvironment reading from os.environ.
    """
    return ProcessEnvironment()


def get_static_environment(values: Optional[Mapping[str, str]] = None) -> EnvironmentSource:
    """
    Factory function to create a StaticEnvironment with the given values.

    **Usage**:
        environ = get_static_environment({"DEBUG": "true"})
        settings = Settings.from_env(environ=environ, ...)

    Args:
        values: Variables to expose.

    Returns:
        StaticEnvironment configured with a copy of `values`.
    """
    return StaticEnvironment(values)
