"""Test attributes, filters, matchers, exit codes, POSIX helpers and result loggers."""

__version__ = "0.1.0"