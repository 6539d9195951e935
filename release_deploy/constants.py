"""Global constants for release-deploy"""

from enum import Enum

APP_NAME = "release-deploy"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".release-deploy.yaml"

# Deploy root layout
RELEASES_DIR = "releases"
CURRENT_LINK_NAME = "current"
WRITE_TEST_FILE = ".write-test"
TEMP_LINK_SUFFIX = ".tmp"

# Release identifiers
RELEASE_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
SHORT_REVISION_LENGTH = 7
UNKNOWN_REVISION = "unknown"

# Revision sources, checked in order
REVISION_ENV_VARS = [
    "GITHUB_SHA",
    "GITEA_SHA",
    "CI_COMMIT_SHA",
]

# Health check defaults
DEFAULT_HEALTHCHECK_CODE_RANGE = "200-299"
DEFAULT_HEALTHCHECK_TIMEOUT = 30  # seconds
DEFAULT_HEALTHCHECK_RETRIES = 3
DEFAULT_HEALTHCHECK_DELAY = 5  # seconds
DEFAULT_HEALTHCHECK_INTERVAL = 5  # seconds

# File sync
DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB

# Directory and file names never copied into a release from a full repository
DEFAULT_EXCLUDE_NAMES = [
    ".git",
    ".gitignore",
    ".gitattributes",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
    ".env",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
    "dist",
    "build",
    "target",
    ".idea",
    ".vscode",
    ".vs",
    ".DS_Store",
    "Thumbs.db",
]

# Command execution
POWERSHELL_CANDIDATES = ["pwsh.exe", "powershell.exe"]


class StageStatus(Enum):
    """Pipeline stage status"""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class HealthStatus(Enum):
    """Health check outcome as reported in outputs"""
    PASSED = "passed"
    FAILED = "failed"


# Error codes
class ErrorCode:
    INPUT_VALIDATION = "RD001"
    CONFIG_ERROR = "RD002"
    INVALID_RANGE = "RD003"
    FILESYSTEM_PRECONDITION = "RD004"
    NOT_A_DIRECTORY = "RD005"
    PERMISSION_DENIED = "RD006"
    DIST_DIR_INVALID = "RD007"
    UNSAFE_POINTER_STATE = "RD008"
    RELEASE_ALLOCATION_FAILED = "RD009"
    POINTER_UPDATE_FAILED = "RD010"
    FILE_SYNC_FAILED = "RD011"
    COMMAND_FAILED = "RD012"
    HEALTHCHECK_FAILED = "RD013"


# Environment variables
ENV_CONFIG_PATH = "RELEASE_DEPLOY_CONFIG"
ENV_GITHUB_OUTPUT = "GITHUB_OUTPUT"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ARROW = "→"
EMOJI_ROCKET = "🚀"
EMOJI_FOLDER = "📁"
EMOJI_PACKAGE = "📦"
EMOJI_BUILD = "🔨"
EMOJI_RELEASE = "📂"
EMOJI_COPY = "📋"
EMOJI_GEAR = "⚙️"
EMOJI_SWITCH = "🔄"
EMOJI_HEALTH = "🏥"
EMOJI_LINK = "🔗"

# Message templates
MSG_STAGE_START = "{emoji} Step {index}: {description}"
MSG_STAGE_SKIPPED = "{emoji} Step {index}: {description} - Skipped ({reason})"
MSG_LINK_UPDATED = f"{EMOJI_LINK} Link updated: {{link}} {EMOJI_ARROW} {{target}}"
MSG_DEPLOY_COMPLETE = f"{EMOJI_SUCCESS} Deployment completed successfully!"
