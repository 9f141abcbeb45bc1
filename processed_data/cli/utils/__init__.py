"""CLI helpers.

Status messages go to stderr so command output (e.g. the schema) can be
piped.
"""

from processed_data.cli.utils.formatters import error, info, success

__all__ = ["error", "info", "success"]
