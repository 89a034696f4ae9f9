"""INI configuration resolution for the dictionary location.

The configuration file carries a single option::

    [dictionary]
    dictionary_file_path = local_db/bigdict.txt
"""

from __future__ import annotations

import configparser
from pathlib import Path
from typing import List, Optional

from ..core.exceptions import ConfigurationError
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config/config.ini")
DEFAULT_DICTIONARY_PATH = Path("local_db/bigdict.txt")

DICTIONARY_SECTION = "dictionary"
DICTIONARY_PATH_OPTION = "dictionary_file_path"


def read_config(path: Path | str) -> configparser.ConfigParser:
    parser = configparser.ConfigParser()
    with Path(path).open(encoding="utf-8") as handle:
        parser.read_file(handle)
    return parser


def resolve_dictionary_path(
    config_path: Path | str | None = None,
    *,
    default_config_path: Path | str = DEFAULT_CONFIG_PATH,
    default_dictionary_path: Path | str = DEFAULT_DICTIONARY_PATH,
) -> Path:
    """Return the dictionary path named by the configuration.

    An unreadable ``config_path`` falls back to ``default_config_path``; if
    that is unreadable too a :class:`ConfigurationError` is raised. A readable
    configuration without the dictionary option yields
    ``default_dictionary_path``.
    """

    candidates: List[Path] = []
    if config_path is not None:
        candidates.append(Path(config_path))
    candidates.append(Path(default_config_path))

    parser: Optional[configparser.ConfigParser] = None
    source: Optional[Path] = None
    for candidate in candidates:
        try:
            parser = read_config(candidate)
        except (OSError, configparser.Error) as exc:
            LOGGER.warning("Could not read configuration %s: %s", candidate, exc)
            continue
        source = candidate
        break

    if parser is None:
        raise ConfigurationError(
            "Could not open the given configuration path nor the default configuration path"
        )

    value = parser.get(DICTIONARY_SECTION, DICTIONARY_PATH_OPTION, fallback="").strip()
    if not value:
        LOGGER.warning(
            "No %s.%s in %s; defaulting to %s",
            DICTIONARY_SECTION,
            DICTIONARY_PATH_OPTION,
            source,
            default_dictionary_path,
        )
        return Path(default_dictionary_path)
    return Path(value)


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DICTIONARY_PATH",
    "read_config",
    "resolve_dictionary_path",
]
