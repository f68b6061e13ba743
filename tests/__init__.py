"""Test suite for the economic indicators pipeline.

This package contains tests for the pipeline including:
- Unit tests for individual modules
- Integration tests for complete runs from raw files to exported artifacts
"""

__version__ = "1.0.0"
