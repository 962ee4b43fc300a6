class GetSetError(Exception):
    """Base class for all GetSet errors"""


class FatalError(GetSetError):
    """Startup failure, the process must not continue"""

    exit_code = 1


class StoreLoadError(FatalError):
    exit_code = 2

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read {path}: {reason}")


class StaticMountError(FatalError):
    exit_code = 1


class CommandError(GetSetError):
    """Malformed request, reported to the client as 400 Bad Request"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StorePersistError(GetSetError):
    """Backing file could not be written during SET"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save {path}: {reason}")
