"""Exception definitions for release-deploy API"""

from ..constants import ErrorCode


class DeployToolError(Exception):
    """Base exception for release-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class InputValidationError(DeployToolError):
    """Invalid input, raised before any I/O"""

    def __init__(self, message: str, error_code: str = ErrorCode.INPUT_VALIDATION):
        super().__init__(message, error_code)


class ConfigError(InputValidationError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class InvalidRangeError(InputValidationError):
    """Health check status code range could not be parsed"""

    def __init__(self, code_range: str):
        message = (
            f"Invalid health check code range: {code_range}. "
            f'Expected format: "200-299"'
        )
        super().__init__(message, ErrorCode.INVALID_RANGE)
        self.code_range = code_range


class FilesystemPreconditionError(DeployToolError):
    """Filesystem precondition failed before any mutation"""

    def __init__(self, message: str, error_code: str = ErrorCode.FILESYSTEM_PRECONDITION):
        super().__init__(message, error_code)


class NotADirectory(FilesystemPreconditionError):
    """Path exists but is not a directory"""

    def __init__(self, path, name: str = "Deploy root"):
        message = f"{name} exists but is not a directory: {path}"
        super().__init__(message, ErrorCode.NOT_A_DIRECTORY)
        self.path = path


class PermissionDenied(FilesystemPreconditionError):
    """Directory is not writable"""

    def __init__(self, path, reason: str = None):
        message = f"Deploy root is not writable: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, ErrorCode.PERMISSION_DENIED)
        self.path = path


class DistDirError(FilesystemPreconditionError):
    """Distribution directory is missing or not a directory"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DIST_DIR_INVALID)


class UnsafePointerStateError(DeployToolError):
    """The active pointer path exists but is not a link

    Never resolved automatically: removing a real directory here could
    delete a live release.
    """

    def __init__(self, path):
        message = (
            f"Safety check failed: {path} exists but is not a symlink or junction. "
            f"Manual intervention required to avoid data loss."
        )
        super().__init__(message, ErrorCode.UNSAFE_POINTER_STATE)
        self.path = path


class ReleaseAllocationError(DeployToolError):
    """Release directory could not be created"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.RELEASE_ALLOCATION_FAILED)


class PointerUpdateError(DeployToolError):
    """Active pointer link could not be created or removed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.POINTER_UPDATE_FAILED)


class FileSyncError(DeployToolError):
    """Copying files into a release failed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.FILE_SYNC_FAILED)


class CommandFailedError(DeployToolError):
    """External command exited with a non-zero status"""

    def __init__(self, description: str, exit_code, stdout: str = "", stderr: str = ""):
        output = stderr or stdout or "No output"
        message = (
            f"Command failed: {description}\n"
            f"Exit code: {exit_code if exit_code is not None else 'unknown'}\n"
            f"{output}"
        )
        super().__init__(message, ErrorCode.COMMAND_FAILED)
        self.description = description
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class HealthCheckFailedError(DeployToolError):
    """Health check exhausted its attempts

    The release is already active when this is raised; ``result`` holds the
    partial deployment outputs so callers can act on ``previous_release``.
    """

    def __init__(self, health, result=None):
        super().__init__(f"Health check failed: {health.error}", ErrorCode.HEALTHCHECK_FAILED)
        self.health = health
        self.result = result
