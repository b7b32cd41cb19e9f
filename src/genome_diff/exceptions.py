"""
Exceptions module for genome-diff.
Defines custom exception classes for better error handling.
"""

class GenomeDiffError(Exception):
    """Base exception class for all genome-diff errors."""

    def __init__(self, message="An error occurred in genome-diff", details=None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidPersonError(GenomeDiffError):
    """Exception raised when a person does not carry the expected chromosome set."""

    def __init__(self, message="Chromosome data does not match expected size", details=None):
        super().__init__(message, details)


class InvalidBaseError(GenomeDiffError):
    """Exception raised for symbols outside the A/C/G/T alphabet."""

    def __init__(self, message="Invalid base symbol", details=None):
        super().__init__(message, details)


class PackingError(GenomeDiffError):
    """Exception raised when bases cannot be packed into whole storage units."""

    def __init__(self, message="Error packing bases", details=None):
        super().__init__(message, details)


class StreamError(GenomeDiffError):
    """Exception raised when a chromosome stream misbehaves."""

    def __init__(self, message="Error reading chromosome stream", details=None):
        super().__init__(message, details)


class AlignmentError(GenomeDiffError):
    """Exception raised when the alignment engine breaks one of its invariants."""

    def __init__(self, message="Error during sequence alignment", details=None):
        super().__init__(message, details)


class ConfigurationError(GenomeDiffError):
    """Exception raised for errors related to configuration."""

    def __init__(self, message="Error with configuration", details=None):
        super().__init__(message, details)


class FileError(GenomeDiffError):
    """Exception raised for errors related to file operations."""

    def __init__(self, message="Error with file operations", details=None):
        super().__init__(message, details)


class ComparisonError(GenomeDiffError):
    """Exception raised when a chromosome comparison step fails unexpectedly."""

    def __init__(self, message="Error comparing chromosomes", details=None):
        super().__init__(message, details)
