"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_FAILED = 2
    SYNC_INCOMPLETE = 3


class OutputFormats(Enum):
    """Export formats supported by the program.

    Args:
        Enum (string): Export formats supported by the program.
    """

    JSON = "json"
    CSV = "csv"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "BUNDLE_RESOLVER_LOG_LEVEL"
    ENV_LOG_FMT = "BUNDLE_RESOLVER_LOG_FMT"
    ENV_CONFIG = "BUNDLE_RESOLVER_CONFIG"
    DEFAULT_CONFIG_FILES = ["bundle-resolver.yml", "bundle-resolver.yaml"]
    SUPPORTED_FORMATS = [OutputFormats.JSON.value, OutputFormats.CSV.value]

    # Priority level used when a repository is registered without one
    DEFAULT_PRIORITY = 0

    # Resolution defaults; overridden by config file, then CLI flags
    RESOLVE_OPTIONAL = False
    RESOLVE_DEPENDENTS = True
    IGNORE_ERRORS = False
    LOCAL_ONLY = False
