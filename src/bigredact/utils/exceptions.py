"""
BigRedact - Custom Exceptions Module

This module defines custom exception classes for specific error cases
in the BigRedact editor.
"""


class BigRedactError(Exception):
    """Base exception for all BigRedact errors.

    All custom exceptions should inherit from this class to allow
    catching any BigRedact-specific error.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional technical details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class NoCurrentPageError(BigRedactError):
    """Raised when an operation needs a current page but the document is empty."""

    def __init__(self, index: int = -1, page_count: int = 0) -> None:
        """Initialize the exception.

        Args:
            index: The page index that was requested
            page_count: Number of pages in the store at the time
        """
        self.index = index
        self.page_count = page_count
        super().__init__(
            "No current page available",
            details=f"index={index}, page_count={page_count}",
        )


class InvalidArgumentError(BigRedactError):
    """Raised when a caller passes an argument outside its valid domain."""

    def __init__(self, argument: str, value: object = None, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            argument: Name of the offending argument
            value: The rejected value
            reason: Optional reason for the rejection
        """
        self.argument = argument
        self.value = value
        self.reason = reason

        msg = f"Invalid value for '{argument}'"
        if reason:
            msg += f": {reason}"

        super().__init__(msg, details=f"value={value!r}")


class ImageDecodeError(BigRedactError):
    """Raised when a raster source cannot be decoded."""

    def __init__(self, source: str, reason: str | None = None) -> None:
        """Initialize the exception.

        Args:
            source: Path or identifier of the image source
            reason: Optional reason why decoding failed
        """
        self.source = source
        self.reason = reason
        msg = f"Could not decode image: {source}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg, details=f"source={source}")


class ExportInProgressError(BigRedactError):
    """Raised when an export is started while another one is still running."""

    def __init__(self) -> None:
        super().__init__("An export is already in progress")


class ConversionError(BigRedactError):
    """Raised when a PDF document cannot be rasterized into page images."""

    def __init__(
        self,
        file_path: str,
        reason: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            file_path: Path to the document that failed conversion
            reason: Optional reason for the failure
            exit_code: Optional exit code from the converter process
        """
        self.file_path = file_path
        self.reason = reason
        self.exit_code = exit_code

        msg = f"PDF conversion failed for: {file_path}"
        if reason:
            msg += f" - {reason}"

        details = f"path={file_path}"
        if exit_code is not None:
            details += f", exit_code={exit_code}"

        super().__init__(msg, details=details)


# Exception hierarchy summary:
# BigRedactError (base)
# ├── NoCurrentPageError
# ├── InvalidArgumentError
# ├── ImageDecodeError
# ├── ExportInProgressError
# └── ConversionError
