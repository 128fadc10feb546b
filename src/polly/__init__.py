"""Runtime support for the Polly service: paths, pid file, log files."""

__version__ = "0.4.0"

SERVICE_NAME = "polly"

# Service-manager files live at fixed locations regardless of the prefix.
UNIT_FILE_PATH = "/etc/systemd/system/polly.service"
INIT_FILE_PATH = "/etc/init.d/polly"
ENV_FILE_NAME = "polly.env"

__all__ = [
    "ENV_FILE_NAME",
    "INIT_FILE_PATH",
    "SERVICE_NAME",
    "UNIT_FILE_PATH",
    "__version__",
]
