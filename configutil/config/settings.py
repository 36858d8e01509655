"""
Service settings and their resolution from layered sources.

**Conceptual**: This module turns three sources of configuration into one
strongly-typed, frozen Settings object:
  - an optional .env file (see env_file.py),
  - the process environment (injected as an EnvironmentSource),
  - explicit overrides set in code through SettingsBuilder.

**Precedence** (highest first), applied per field:
  1. Non-empty value from the .env file.
  2. Non-empty value from the environment.
  3. The override set on the builder, or the field's zero default.

A per-deployment file therefore beats code-supplied defaults, while variables
injected by a container runtime still apply whenever the file is silent.

**Validation** happens in Settings.__post_init__: DATABASE_URL and
AUTH_SERVICE_URL must be non-empty, so an invalid Settings can never exist.

**Usage**:
    settings = (
        SettingsBuilder()
        .with_port("8080")
        .with_env_file("deploy/.env")
        .build()
    )
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from configutil.config.env_file import EnvFileLoader, is_path_given
from configutil.config.errors import MissingRequiredFieldError
from configutil.utils.environment import EnvironmentSource, get_process_environment

logger = logging.getLogger(__name__)

# Settings attribute -> environment variable / .env key
FIELD_ENV_KEYS: Dict[str, str] = {
    "database_url": "DATABASE_URL",
    "auth_service_url": "AUTH_SERVICE_URL",
    "debug": "DEBUG",
    "port": "PORT",
    "google_client_id": "GOOGLE_CLIENT_ID",
    "google_client_secret": "GOOGLE_CLIENT_SECRET",
}

# Checked in this order
REQUIRED_FIELDS = ("database_url", "auth_service_url")

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(text: str) -> bool:
    """
    Parse a boolean setting.

    Accepted spellings: 1, t, T, TRUE, true, True and 0, f, F, FALSE, false,
    False. Anything else (including "yes" and surrounding whitespace) is
    rejected.

    Args:
        text: Raw value from the .env file or environment.

    Returns:
        The parsed boolean.

    Raises:
        ValueError: If `text` is not one of the accepted spellings.
    """
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value: {text!r}")


@dataclass(frozen=True)
class Settings:
    """
    Resolved runtime configuration for a service process.

    **Conceptual**: Built once at startup and then shared read-only for the
    life of the process. The dataclass is frozen, so no field changes after
    construction and instances can be passed between threads freely.

    **Invariant**: database_url and auth_service_url are non-empty. Direct
    construction with an empty value raises MissingRequiredFieldError, the
    same error the builder surfaces.

    Attributes:
        database_url: Database connection string (DATABASE_URL). REQUIRED.
        auth_service_url: Base URL of the auth service (AUTH_SERVICE_URL). REQUIRED.
        debug: Debug mode flag (DEBUG). Default False.
        port: Port the service listens on, kept as text (PORT). Default "".
        google_client_id: Google OAuth client id (GOOGLE_CLIENT_ID).
        google_client_secret: Google OAuth client secret (GOOGLE_CLIENT_SECRET).
                              Hidden from repr().
    """
    database_url: str
    auth_service_url: str
    debug: bool = False
    port: str = ""
    google_client_id: str = ""
    google_client_secret: str = field(default="", repr=False)

    def __post_init__(self):
        """Validate required settings after initialization."""
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                raise MissingRequiredFieldError(name, FIELD_ENV_KEYS[name])

    @classmethod
    def from_env(
        cls,
        database_url: str = "",
        auth_service_url: str = "",
        debug: bool = False,
        port: str = "",
        google_client_id: str = "",
        google_client_secret: str = "",
        env_file: Union[str, Path] = "",
        environ: Optional[EnvironmentSource] = None,
        search_root: Optional[Union[str, Path]] = None,
    ) -> "Settings":
        """
        Load settings from the .env file and environment, over the given defaults.

        **Conceptual**: Keyword form of SettingsBuilder. Each argument is an
        override with the lowest precedence; empty strings mean "not set".

        Args:
            database_url, auth_service_url, debug, port, google_client_id,
            google_client_secret: Overrides for the matching fields.
            env_file: Explicit .env path. Empty falls back to ENV_FILE and
                      then to the upward search from `search_root`.
            environ: Environment source. Defaults to the process environment.
            search_root: Directory to search upward from for ".env".
                         None disables the search.

        Returns:
            Validated Settings.

        Raises:
            ConfigLoadError: If the .env file exists but cannot be parsed.
            MissingRequiredFieldError: If DATABASE_URL or AUTH_SERVICE_URL
                                       is empty after all fallbacks.

        Usage example:
            >>> settings = Settings.from_env(port="8080", search_root=".")
            >>> settings.port  # "8080" unless PORT is set in .env or env
        """
        return (
            SettingsBuilder(environ=environ, search_root=search_root)
            .with_database_url(database_url)
            .with_auth_service_url(auth_service_url)
            .with_debug(debug)
            .with_port(port)
            .with_google_client_id(google_client_id)
            .with_google_client_secret(google_client_secret)
            .with_env_file(env_file)
            .build()
        )


class SettingsBuilder:
    """
    Collects overrides and resolves them into Settings.

    **Override rules**:
      - Setters apply in call order; a later call for the same field wins.
      - String setters ignore empty values, so passing "" leaves the current
        value alone. This lets callers forward optional CLI flags blindly.
      - with_debug always applies (there is no "unset" boolean).

    Setters return the builder so calls can be chained.
    """

    def __init__(
        self,
        environ: Optional[EnvironmentSource] = None,
        search_root: Optional[Union[str, Path]] = None,
    ):
        self.environ = environ if environ is not None else get_process_environment()
        self.search_root = search_root
        self._values: Dict[str, Union[str, bool]] = {
            "database_url": "",
            "auth_service_url": "",
            "debug": False,
            "port": "",
            "google_client_id": "",
            "google_client_secret": "",
        }
        self._env_file: Union[str, Path] = ""

    def _set(self, name: str, value: str) -> "SettingsBuilder":
        if value:
            self._values[name] = value
        return self

    def with_database_url(self, url: str) -> "SettingsBuilder":
        return self._set("database_url", url)

    def with_auth_service_url(self, url: str) -> "SettingsBuilder":
        return self._set("auth_service_url", url)

    def with_debug(self, debug: bool) -> "SettingsBuilder":
        self._values["debug"] = debug
        return self

    def with_port(self, port: str) -> "SettingsBuilder":
        return self._set("port", port)

    def with_google_client_id(self, client_id: str) -> "SettingsBuilder":
        return self._set("google_client_id", client_id)

    def with_google_client_secret(self, client_secret: str) -> "SettingsBuilder":
        return self._set("google_client_secret", client_secret)

    def with_env_file(self, path: Union[str, Path]) -> "SettingsBuilder":
        """Use `path` as the .env file instead of ENV_FILE or the upward search."""
        if is_path_given(path):
            self._env_file = path
        return self

    def build(self) -> Settings:
        """
        Resolve all sources into a validated Settings.

        **Functionally**:
          1. Loads the .env file (explicit path, ENV_FILE, or upward search).
          2. For each string field: file value, else environment value,
             else the builder value.
          3. For debug: the same candidate, parsed with parse_bool. Invalid
             text is logged and the builder value is kept.
          4. Constructs Settings, which validates the required fields.

        Calling build() twice with unchanged inputs yields equal Settings.

        Returns:
            Validated Settings.

        Raises:
            ConfigLoadError: If the .env file exists but cannot be parsed.
            MissingRequiredFieldError: If a required field is empty.
        """
        loader = EnvFileLoader(environ=self.environ, search_root=self.search_root)
        envs = loader.load(self._env_file)

        resolved: Dict[str, Union[str, bool]] = {}
        for name, key in FIELD_ENV_KEYS.items():
            fallback = self._values[name]
            if isinstance(fallback, bool):
                resolved[name] = _lookup_bool(envs, self.environ, key, fallback)
            else:
                resolved[name] = _lookup(envs, self.environ, key, fallback)

        settings = Settings(**resolved)
        logger.debug(
            "Settings resolved (debug=%s, port=%s)", settings.debug, settings.port or "<unset>"
        )
        return settings


def _lookup(
    envs: Mapping[str, str],
    environ: EnvironmentSource,
    key: str,
    fallback: str,
) -> str:
    """Return the first non-empty value among .env entry, environment, fallback."""
    value = envs.get(key)
    if value:
        return value
    value = environ.get(key)
    if value:
        return value
    return fallback


def _lookup_bool(
    envs: Mapping[str, str],
    environ: EnvironmentSource,
    key: str,
    fallback: bool,
) -> bool:
    text = _lookup(envs, environ, key, "")
    if not text:
        return fallback
    try:
        return parse_bool(text)
    except ValueError:
        logger.warning("Invalid boolean value for %s (%r), using fallback %s", key, text, fallback)
        return fallback


# Process-wide settings, resolved on first access
_default_settings: Optional[Settings] = None


def get_settings(
    environ: Optional[EnvironmentSource] = None,
    search_root: Optional[Union[str, Path]] = None,
) -> Settings:
    """
    Get the global settings singleton.

    **Conceptual**: Settings are resolved from the environment on the first
    call, then cached for the rest of the process. Later arguments are
    ignored once the cache is populated; call reset_settings() first to
    resolve again.

    Args:
        environ: Environment source for the first resolution.
                 Defaults to the process environment.
        search_root: Directory to search upward from for ".env".
                     Defaults to the current working directory.

    Returns:
        Global Settings singleton.

    Raises:
        ConfigLoadError: If the .env file exists but cannot be parsed.
        MissingRequiredFieldError: If a required field is empty.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env(
            environ=environ,
            search_root=search_root if search_root is not None else Path.cwd(),
        )

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    Returns:
        None (side effect: clears global settings cache).
    """
    global _default_settings
    _default_settings = None
