"""Shared utilities for huellas."""

from huellas.utils.logger import get_logger

__all__ = ["get_logger"]
