"""
Locating and reading optional .env files.

**Conceptual**: A .env file lets a deployment pin configuration next to the
service without touching the process environment. The file is optional: when
none is found, the loader returns an empty mapping and settings resolution
continues with environment variables only.

**Path resolution** (first match wins):
  1. An explicit path passed to EnvFileLoader.load().
  2. The ENV_FILE variable of the injected environment source.
  3. An upward search for ".env" starting at the injected search root.

**Parsing** is delegated to python-dotenv. A file that exists but cannot be
read, or that contains a line python-dotenv cannot parse, is a hard error
(ConfigLoadError) rather than a silent partial load.
"""

import io
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values
from dotenv.parser import parse_stream

from configutil.config.errors import ConfigLoadError
from configutil.utils.environment import EnvironmentSource, get_process_environment

logger = logging.getLogger(__name__)

# Control variable naming an alternate .env file
ENV_FILE_VARIABLE = "ENV_FILE"

DEFAULT_ENV_FILENAME = ".env"


def is_path_given(path: Union[str, Path, None]) -> bool:
    """
    Return True if `path` names a file rather than meaning "not given".

    Path("") normalises to Path("."), so both "" and "." count as not given.
    """
    return path is not None and str(path) not in ("", ".")


def find_env_file(
    start_dir: Union[str, Path],
    filename: str = DEFAULT_ENV_FILENAME,
) -> Optional[Path]:
    """
    Search `start_dir` and its parents for `filename`.

    The search stops at the filesystem root, so the number of probes is
    bounded by the depth of `start_dir`.

    Args:
        start_dir: Directory to start from.
        filename: Name of the file to look for (default ".env").

    Returns:
        Path of the first match, or None if no directory up to the root has it.

    Example:
        >>> find_env_file("/srv/app/service")  # finds /srv/app/.env
        PosixPath('/srv/app/.env')
    """
    directory = Path(start_dir).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / filename
        if candidate.is_file():
            return candidate
    return None


class EnvFileLoader:
    """
    Reads the optional .env file into a key -> value mapping.

    **Why inject environ and search_root?**
      - ENV_FILE is read from the same EnvironmentSource that settings
        resolution uses, so tests control it without touching os.environ.
      - The directory to search from is chosen by the caller instead of being
        derived from where the library happens to be installed.

    Attributes:
        environ: Source for the ENV_FILE control variable.
        search_root: Directory where the upward .env search starts.
                     None disables the search.
    """

    def __init__(
        self,
        environ: Optional[EnvironmentSource] = None,
        search_root: Optional[Union[str, Path]] = None,
    ):
        self.environ = environ if environ is not None else get_process_environment()
        self.search_root = Path(search_root) if search_root is not None else None

    def resolve_path(self, path_hint: Union[str, Path] = "") -> Optional[Path]:
        """
        Work out which file to load, without checking that it exists.

        Args:
            path_hint: Explicit file path; empty means "not given".

        Returns:
            Path to load, or None when no hint, no ENV_FILE and no .env
            above the search root.
        """
        if is_path_given(path_hint):
            return Path(path_hint)

        env_file = self.environ.get(ENV_FILE_VARIABLE)
        if env_file:
            return Path(env_file)

        if self.search_root is not None:
            return find_env_file(self.search_root)

        return None

    def load(self, path_hint: Union[str, Path] = "") -> Dict[str, str]:
        """
        Load the .env file and return its entries.

        **Functionally**:
          - Resolves the path (see resolve_path).
          - Missing path or missing file: logs a warning, returns {}.
          - Unreadable file or unparseable line: raises ConfigLoadError.
          - Keys declared without a value ("KEY" with no "=") are omitted.

        Args:
            path_hint: Explicit file path; empty means "not given".

        Returns:
            Mapping of keys to string values as parsed by python-dotenv.

        Raises:
            ConfigLoadError: If the file exists but cannot be read or parsed.
        """
        path = self.resolve_path(path_hint)

        if path is None or not path.exists():
            logger.warning(
                ".env file not found at %s, using only OS environment variables",
                path if path is not None else "<none>",
            )
            return {}

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigLoadError(path, str(e), cause=e) from e

        for binding in parse_stream(io.StringIO(text)):
            if binding.error:
                error = ValueError(
                    f"could not parse line {binding.original.line}: "
                    f"{binding.original.string.strip()!r}"
                )
                raise ConfigLoadError(path, str(error), cause=error) from error

        values = dotenv_values(stream=io.StringIO(text), interpolate=False)
        envs = {key: value for key, value in values.items() if value is not None}

        logger.debug("Loaded %d entries from %s", len(envs), path)
        return envs
