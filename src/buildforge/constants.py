"""Constants for buildforge CLI."""

# Working state directory and its files
STATE_DIR = ".buildforge"
CONFIG_FILE = "config.toml"
REGISTRY_FILE = "builds.json"
LOG_FILE = "build.log"

# Remote release listing
RELEASES_TIMEOUT = 30
DEFAULT_RELEASE_LIMIT = 10

# Timestamp prefix for build.log lines
LOG_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
