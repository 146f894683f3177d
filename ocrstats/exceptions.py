"""
Exception classes for ocrstats.

All ocrstats exceptions inherit from OCRStatsError,
making it easy to catch all library errors.

Example:
    >>> try:
    ...     pages = ocrstats.read_pages("page.xyz")
    ... except ocrstats.UnsupportedFormatError as e:
    ...     print(f"Format not supported: {e}")
    ... except ocrstats.OCRStatsError as e:
    ...     print(f"ocrstats error: {e}")
"""


class OCRStatsError(Exception):
    """
    Base exception for all ocrstats errors.

    Catch this to handle any ocrstats-specific error.
    """

    pass


class UnsupportedFormatError(OCRStatsError):
    """
    Raised when an input format is not supported.

    Example:
        >>> ocrstats.detect_format("page.docx")
        UnsupportedFormatError: Cannot detect format for: page.docx
    """

    pass


class PageParseError(OCRStatsError):
    """
    Raised when a page cannot be parsed into a token stream.

    The collector logs these and skips the page; the run continues.
    """

    pass


class DocumentIdError(OCRStatsError):
    """
    Raised when a document id cannot be derived from an input path.

    This halts the run: the file filter must contain at least one
    capture group.
    """

    pass


class ConfigurationError(OCRStatsError):
    """
    Raised for invalid configuration.

    Example:
        >>> parse_replacement_rules("a=b=c")
        ConfigurationError: Invalid replacement rule: a=b=c
    """

    pass
