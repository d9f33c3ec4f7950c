"""Constants used in the project."""


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_CRATES = "https://crates.io/api/v1/crates/"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
    DEFAULT_LOG_LEVEL = "WARNING"
    YANKED_MARKER = " (yanked)"

    # Environment overrides
    ENV_LOG_LEVEL = "CHECK_LATEST_LOG_LEVEL"
    ENV_REGISTRY_URL = "CHECK_LATEST_REGISTRY_URL"
    ENV_TIMEOUT = "CHECK_LATEST_TIMEOUT"
