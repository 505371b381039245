"""Scoped wrappers for pipes, signal masks and signal handlers."""

from __future__ import annotations

import errno
import os
import signal
from collections.abc import Callable, Iterable
from typing import Any


def err_string(errnum: int) -> str:
    """Return the system's message for an error number."""
    try:
        return os.strerror(errnum)
    except ValueError:
        return ""


def _os_error(code: int) -> OSError:
    return OSError(code, err_string(code))


class ScopedPipe:
    """A pipe whose ends are closed when the scope ends."""

    def __init__(self) -> None:
        self.read_fd = -1
        self.write_fd = -1

    def open(self, cloexec: bool = False) -> None:
        """Create the pipe; ``cloexec`` keeps its ends from child processes."""
        if self.read_fd != -1 or self.write_fd != -1:
            raise RuntimeError("pipe is already open")
        read_fd, write_fd = os.pipe()
        if not cloexec:
            os.set_inheritable(read_fd, True)
            os.set_inheritable(write_fd, True)
        self.read_fd, self.write_fd = read_fd, write_fd

    def close_read(self) -> None:
        os_fd = self.read_fd
        self._close(os_fd)
        self.read_fd = -1

    def close_write(self) -> None:
        os_fd = self.write_fd
        self._close(os_fd)
        self.write_fd = -1

    def move_read(self, new_fd: int) -> None:
        """Move the read end onto ``new_fd``."""
        if self._move(self.read_fd, new_fd):
            self.read_fd = -1

    def move_write(self, new_fd: int) -> None:
        """Move the write end onto ``new_fd``."""
        if self._move(self.write_fd, new_fd):
            self.write_fd = -1

    @staticmethod
    def _close(fd: int) -> None:
        if fd == -1:
            raise _os_error(errno.EBADF)
        os.close(fd)

    def _move(self, old_fd: int, new_fd: int) -> bool:
        if old_fd == -1:
            raise _os_error(errno.EBADF)
        if old_fd == new_fd:
            return False
        os.dup2(old_fd, new_fd)
        os.close(old_fd)
        return True

    def __enter__(self) -> ScopedPipe:
        return self

    def __exit__(self, *args: Any) -> None:
        for closer in (self.close_read, self.close_write):
            try:
                closer()
            except OSError:
                pass


class ScopedSigprocmask:
    """A stack of signal-mask changes, undone when the scope ends."""

    def __init__(self) -> None:
        self._old_masks: list[set[signal.Signals]] = []

    def push(self, how: int, signals: int | Iterable[int]) -> None:
        """Change the mask with ``how`` (SIG_BLOCK, SIG_UNBLOCK, SIG_SETMASK)."""
        mask = {signals} if isinstance(signals, int) else set(signals)
        old = signal.pthread_sigmask(how, mask)
        self._old_masks.append(set(old))

    def pop(self) -> None:
        """Undo the most recent change."""
        if not self._old_masks:
            raise IndexError("no signal mask to pop")
        signal.pthread_sigmask(signal.SIG_SETMASK, self._old_masks[-1])
        self._old_masks.pop()

    def clear(self) -> None:
        """Restore the mask in effect before the first change."""
        if self._old_masks:
            signal.pthread_sigmask(signal.SIG_SETMASK, self._old_masks[0])
        self._old_masks.clear()

    def __enter__(self) -> ScopedSigprocmask:
        return self

    def __exit__(self, *args: Any) -> None:
        self.clear()


class ScopedSigaction:
    """A signal handler that is replaced by the previous one when closed."""

    def __init__(self) -> None:
        self._signum = 0
        self._old_handler: Any = None

    def open(self, signum: int, handler: Callable[..., Any] | int) -> None:
        if self._signum != 0:
            raise RuntimeError("signal handler is already installed")
        old = signal.signal(signum, handler)
        self._old_handler = signal.SIG_DFL if old is None else old
        self._signum = signum

    def close(self) -> None:
        if self._signum == 0:
            raise _os_error(errno.EINVAL)
        signum, self._signum = self._signum, 0
        signal.signal(signum, self._old_handler)
        self._old_handler = None

    def __enter__(self) -> ScopedSigaction:
        return self

    def __exit__(self, *args: Any) -> None:
        if self._signum != 0:
            self.close()