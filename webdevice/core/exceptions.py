"""webdevice exceptions."""


class WebDeviceError(Exception):
    """Base exception for all webdevice errors."""
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class CompileFailure(WebDeviceError):
    """Raised when the entrypoint fails to compile to JavaScript."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="COMPILE_FAILED", details=details)


class BindError(WebDeviceError):
    """Raised when the asset server cannot allocate a loopback socket."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="BIND_FAILED", details=details)


class ToolExit(WebDeviceError):
    """Unrecoverable condition: the tool cannot proceed and must exit."""
    def __init__(self, message: str, code: str = "TOOL_EXIT", exit_code: int = 1, details: dict | None = None):
        super().__init__(message, code=code, details=details)
        self.exit_code = exit_code


class BundleBuildFailure(ToolExit):
    """Raised when the asset bundle cannot be built."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="BUNDLE_BUILD_FAILED", details=details)


class UnsupportedPlatformError(ToolExit):
    """Raised when no browser lookup strategy exists for the host platform."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="UNSUPPORTED_PLATFORM", details=details)


class ExecutableNotFoundError(ToolExit):
    """Raised when the resolved browser executable does not exist."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, code="EXECUTABLE_NOT_FOUND", details=details)
