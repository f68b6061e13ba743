"""
Custom exceptions for the economic indicators pipeline.

This module defines a hierarchy of exceptions to provide more
precise error handling and debugging across the pipeline.
"""


class PipelineBaseError(Exception):
    """
    Base exception for all pipeline-related errors.

    All custom exceptions in the pipeline should inherit from this class.
    Provides a common base for catching and handling pipeline-specific errors.
    """

    pass


class ConfigurationError(PipelineBaseError):
    """
    Raised when there are configuration-related issues.

    This exception is used when:
    - Required configuration parameters are missing
    - Configuration values are invalid
    - Data directories cannot be created
    """

    pass


class IngestError(PipelineBaseError):
    """
    Raised while reading a raw World Bank indicator file.

    Errors of this family are local to one indicator: the run records
    the indicator as skipped and continues with the others.
    """

    pass


class MissingInputFileError(IngestError, FileNotFoundError):
    """
    Raised when a declared source file does not exist.

    Also a ``FileNotFoundError`` so callers outside the pipeline can
    catch it the usual way.
    """

    pass


class ParseError(IngestError):
    """
    Raised when a source file exists but cannot be parsed.

    Covers issues such as:
    - Empty or truncated files
    - Encoding problems
    - A layout that does not match the World Bank export format
    """

    pass


class ExportError(PipelineBaseError):
    """
    Raised when the output artifacts cannot be written.

    Fatal for the run: the output directory could not be created
    or one of the files could not be written.
    """

    pass
