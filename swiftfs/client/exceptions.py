# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
class SwiftError(Exception):
    """Base exception for SwiftFS errors."""
    def __init__(self, message: str, code: str = "ERR_UNKNOWN"):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")

class AuthenticationError(SwiftError):
    """Authentication failed."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_AUTH")

class ContainerError(SwiftError):
    """Container operation failed."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_CONTAINER"
        if operation:
            code = f"ERR_CONTAINER_{operation.upper()}"
        super().__init__(message, code=code)

class ObjectError(SwiftError):
    """Object operation failed."""
    def __init__(self, message: str, operation: str = None):
        code = "ERR_OBJECT"
        if operation:
            code = f"ERR_OBJECT_{operation.upper()}"
        super().__init__(message, code=code)

class ConfigurationError(SwiftError):
    """Configuration or credential error."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_CONFIG")

class InvalidPathError(SwiftError):
    """Path cannot be resolved against the store root."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_PATH")

class SwiftProtocolError(SwiftError):
    """A response carried a value in an unexpected format."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_PROTOCOL")

class FileAlreadyExistsError(SwiftError):
    """Rename destination is an existing file."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_EXISTS")

class RenameBlockedError(SwiftError):
    """Rename destination path is blocked by a file."""
    def __init__(self, message: str):
        super().__init__(message, code="ERR_RENAME_BLOCKED")
