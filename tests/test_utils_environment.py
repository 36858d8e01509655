"""
Tests for configutil/utils/environment.py

These tests verify the environment source abstraction works for both the live
process environment and fixed mappings.
"""

from configutil.utils.environment import (
    ProcessEnvironment,
    StaticEnvironment,
    get_process_environment,
    get_static_environment,
)


def test_process_environment_reads_os_environ(monkeypatch):
    """Test that ProcessEnvironment sees variables set in os.environ."""
    monkeypatch.setenv("CONFIGUTIL_TEST_VAR", "hello")
    environ = ProcessEnvironment()

    assert environ.get("CONFIGUTIL_TEST_VAR") == "hello"


def test_process_environment_sees_later_changes(monkeypatch):
    """Test that lookups happen at call time, not at construction."""
    monkeypatch.delenv("CONFIGUTIL_TEST_VAR", raising=False)
    environ = ProcessEnvironment()
    assert environ.get("CONFIGUTIL_TEST_VAR") is None

    monkeypatch.setenv("CONFIGUTIL_TEST_VAR", "later")
    assert environ.get("CONFIGUTIL_TEST_VAR") == "later"


def test_static_environment_returns_configured_values():
    """Test that StaticEnvironment serves exactly the given mapping."""
    environ = StaticEnvironment({"PORT": "8080"})

    assert environ.get("PORT") == "8080"
    assert environ.get("DATABASE_URL") is None


def test_static_environment_copies_input():
    """Test that mutating the source dict does not affect lookups."""
    values = {"PORT": "8080"}
    environ = StaticEnvironment(values)
    values["PORT"] = "9090"
    values["DEBUG"] = "true"

    assert environ.get("PORT") == "8080"
    assert environ.get("DEBUG") is None


def test_static_environment_defaults_to_empty():
    """Test that StaticEnvironment() with no mapping has no variables."""
    assert StaticEnvironment().get("PATH") is None


def test_static_environment_ignores_process_environment(monkeypatch):
    """Test that StaticEnvironment is isolated from os.environ."""
    monkeypatch.setenv("DATABASE_URL", "postgres://from-process")

    assert StaticEnvironment({}).get("DATABASE_URL") is None


def test_factories_return_working_sources(monkeypatch):
    """Test that the factory functions return usable sources."""
    monkeypatch.setenv("CONFIGUTIL_TEST_VAR", "x")

    assert get_process_environment().get("CONFIGUTIL_TEST_VAR") == "x"
    assert get_static_environment({"A": "1"}).get("A") == "1"
    assert get_static_environment().get("A") is None
