"""Log callables passed through the loader, engine and command line."""

import sys


def quiet(message):
    """Discard a log message."""


class DebugLog:
    """
    Log to both console and a debug file.

    Instances are callable, so they can be handed to anything that takes a
    ``log(message)`` function. The file is only written while the log is open.
    """

    def __init__(self, path=None, echo=True, stream=None):
        self.path = path
        self.echo = echo
        self.stream = stream
        self._file = None

    def open(self):
        if self.path and self._file is None:
            self._file = open(self.path, 'w', encoding='utf-8')
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __call__(self, message):
        if self.echo:
            print(message, file=self.stream or sys.stdout)
        if self._file is not None:
            self._file.write(message + "\n")
