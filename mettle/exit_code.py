"""Process exit codes; values from 64 up follow the sysexits convention."""

import enum


class ExitCode(enum.IntEnum):
    """Exit statuses reported by the test driver."""

    SUCCESS = 0
    FAILURE = 1
    TIMEOUT = 32
    BAD_ARGS = 64
    NO_INPUTS = 66
    UNKNOWN_ERROR = 70
    FATAL = 71