"""
Exceptions raised while resolving service settings.

Both concrete errors are fatal: the hosting process is expected to abort
startup when either reaches it. Conditions that are recoverable by design
(missing .env file, invalid boolean text) are logged as warnings instead.
"""

from pathlib import Path
from typing import Optional, Union


class ConfigError(Exception):
    """
    Base class for every error raised by configutil.

    **Usage**: Catch this at the service entrypoint to report a configuration
    problem and exit, without caring which step of resolution failed.
    """
    pass


class ConfigLoadError(ConfigError):
    """
    Raised when a .env file exists but cannot be read or parsed.

    The underlying I/O or parse error is kept on `cause` and chained as
    `__cause__` by the raising code.

    Attributes:
        path: Path of the file that failed to load.
        cause: The original exception, or None for parse errors detected
               by the loader itself.
    """

    def __init__(
        self,
        path: Union[str, Path],
        message: str,
        cause: Optional[BaseException] = None,
    ):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Error reading env file {self.path}: {message}")


class MissingRequiredFieldError(ConfigError, ValueError):
    """
    Raised when a required setting is empty after all fallbacks.

    Attributes:
        field: Settings attribute name (e.g. "database_url").
        env_key: Environment variable that supplies it (e.g. "DATABASE_URL").
    """

    def __init__(self, field: str, env_key: str):
        self.field = field
        self.env_key = env_key
        super().__init__(
            f"{env_key} is required but not set ({field}). "
            "Please set it in your .env file or environment variables."
        )
