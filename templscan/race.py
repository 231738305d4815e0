"""A gated reader used to release many request bodies at the same moment."""

from __future__ import annotations

import io
import threading
from typing import BinaryIO


class SyncedReader:
    """Seekable reader whose final read waits until the gate is opened."""

    def __init__(self, source: bytes | bytearray | BinaryIO) -> None:
        if isinstance(source, (bytes, bytearray, memoryview)):
            data = bytes(source)
        else:
            data = source.read()
            source.close()
        self._data = data
        self._position = 0
        self._gate = threading.Semaphore(0)
        self._blocking = True
        self._closed = False

    def __len__(self) -> int:
        return len(self._data)

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def set_open_gate(self, status: bool) -> None:
        """Enable or disable waiting on the gate."""
        self._blocking = status

    def open_gate(self) -> None:
        """Release one read waiting on the gate."""
        self._gate.release()

    def open_gate_after(self, delay: float) -> threading.Timer:
        """Open the gate after ``delay`` seconds."""
        timer = threading.Timer(delay, self.open_gate)
        timer.daemon = True
        timer.start()
        return timer

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the position; SEEK_SET always rewinds to the start."""
        length = len(self._data)
        if whence == io.SEEK_SET:
            self._position = 0
        elif whence == io.SEEK_CUR:
            if self._position + offset >= length:
                raise ValueError("offset is too big")
            self._position += offset
        elif whence == io.SEEK_END:
            if length - offset < 0:
                raise ValueError("offset is too big")
            self._position = length - offset
        return self._position

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, waiting on the gate if this reaches the end."""
        length = len(self._data)
        if size is None or size < 0:
            size = length - self._position
        if self._position + size >= length and self._blocking:
            self._gate.acquire()
        chunk = self._data[self._position:self._position + size]
        self._position += len(chunk)
        return chunk

    def close(self) -> None:
        """Mark the reader as closed."""
        self._closed = True


def new_open_gate_with_timeout(data: bytes | bytearray | BinaryIO, delay: float) -> SyncedReader:
    """Create a reader whose gate opens by itself after ``delay`` seconds."""
    reader = SyncedReader(data)
    reader.open_gate_after(delay)
    return reader