# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""File manipulation utilities."""

import os
import signal
import threading

from contextlib import contextmanager

BUFSIZE = 128 * 1024

def is_filename(obj):
    return isinstance(obj, (str, bytes, os.PathLike))

@contextmanager
def opened(filename, mode):
    "Open filename, or do nothing if filename is already an open file object"
    if is_filename(filename):
        file = open(filename, mode)
        try:
            yield file
        finally:
            if not file.closed:
                file.close()
    else:
        yield filename

@contextmanager
def suppress_interrupt():
    """Suppress KeyboardInterrupt exceptions while the context is active.

    The suppressed interrupt (if any) is raised when the context is exited.
    Outside the main thread, signal handlers can't be installed and the
    context does nothing.
    """
    if threading.current_thread() is not threading.main_thread():
        yield None
        return

    interrupted = False

    def sigint_handler(signum, frame):
        nonlocal interrupted
        interrupted = True

    s = signal.signal(signal.SIGINT, sigint_handler)
    try:
        yield None
    finally:
        signal.signal(signal.SIGINT, s)
    if interrupted:
        raise KeyboardInterrupt()

def copy_tail(src, dst, offset):
    """Copy everything in file src from offset to its end into file dst.
    Returns the number of bytes copied."""
    src.seek(offset)
    copied = 0
    while True:
        buf = src.read(BUFSIZE)
        if not buf:
            break
        dst.write(buf)
        copied += len(buf)
    return copied

def same_file(filename, other):
    "True if other names the same file as filename."
    if not is_filename(other):
        return False
    if os.path.exists(filename) and os.path.exists(other):
        return os.path.samefile(filename, other)
    return os.path.abspath(os.fsdecode(filename)) == os.path.abspath(os.fsdecode(other))
