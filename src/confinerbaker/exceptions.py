"""Exception hierarchy for confinerbaker."""


class ConfinerError(Exception):
    """Base exception for all confinerbaker errors."""

    pass


class GeometryError(ConfinerError):
    """Errors in geometric calculations."""

    pass


class ContourError(GeometryError):
    """Error with contour data or operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class BakeError(ConfinerError):
    """Error while baking confiner states."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Bake failed: {reason}")


class PathConversionError(ConfinerError):
    """Error converting polygons into a confiner path."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Path conversion failed: {reason}")


class FileFormatError(ConfinerError):
    """Errors related to reading or writing confiner files."""

    pass


class ContourFileError(FileFormatError):
    """Error loading a contour file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load contours '{path}': {reason}")


class StateFileError(FileFormatError):
    """Error reading or writing a baked state file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid state file '{path}': {reason}")
