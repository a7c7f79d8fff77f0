"""
Base exception hierarchy for labelstats.

All custom exceptions inherit from LabelStatsError so callers can catch
everything raised by the package in one place, while each subclass also
derives from the matching built-in exception.
"""


class LabelStatsError(Exception):
    """Base exception for all labelstats errors."""

    pass


class UsageError(LabelStatsError, ValueError):
    """Raised when required input is missing or resolves to nothing."""

    pass


class ImageListMismatchError(UsageError):
    """Raised when gray and label image lists cannot be paired positionally."""

    def __init__(self, n_images: int, n_label_images: int):
        self.n_images = n_images
        self.n_label_images = n_label_images
        message = (
            f"Got {n_images} gray image(s) but {n_label_images} label image(s). "
            f"Label images must be given in the same order and number as the gray images."
        )
        super().__init__(message)


class FileAccessError(LabelStatsError, OSError):
    """Raised when an input or output file cannot be opened."""

    pass


class LabelDefinitionError(LabelStatsError, ValueError):
    """Raised when a label definition table row cannot be parsed."""

    def __init__(self, path, line_number: int, reason: str):
        self.path = path
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{path}, line {line_number}: {reason}")


class EngineError(LabelStatsError, RuntimeError):
    """Raised when the statistics engine fails or returns an unusable table."""

    pass


class TableShapeError(LabelStatsError, ValueError):
    """Raised when an output row does not fit the table it is written to."""

    pass
