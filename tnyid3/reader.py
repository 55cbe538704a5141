# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Incremental ID3v2.2/ID3v2.3 tag reader.

The reader never blocks: it is fed whatever bytes are currently available
and makes as much progress as it can, then waits for the next batch.
A frame header that has been read is remembered until its payload
arrives, so no state is lost between batches.
"""

import collections
import enum

from tnyid3.errors import *
from tnyid3.conversion import *
from tnyid3.frames import Frame, FRAME22_HEADER_SIZE, FRAME23_HEADER_SIZE

HEADER_SIZE = 10

_TAG_UNSYNCHRONISED = 0x80
_TAG_EXTENDED_HEADER = 0x40
_TAG_EXPERIMENTAL = 0x20
_TAG_KNOWN_FLAGS = _TAG_UNSYNCHRONISED | _TAG_EXTENDED_HEADER | _TAG_EXPERIMENTAL


class TagHeader(collections.namedtuple("TagHeader", "version revision flags size")):
    """The ten-byte ID3v2 tag header.

    size is the declared tag size, excluding the header itself.
    """
    __slots__ = ()

    @classmethod
    def default(cls):
        "Header values for files without an ID3v2 tag."
        return cls(3, 0, 0, 0)

    @classmethod
    def decode(cls, data):
        if data[0:3] != b"ID3":
            raise TagError("ID3v2 header not found")
        version = data[3]
        if version not in (2, 3):
            raise UnsupportedVersionError(
                "Unsupported ID3 version: 2.{0}.{1}; only 2.2 and 2.3 are supported"
                .format(version, data[4]))
        flags = data[5]
        if flags & _TAG_EXTENDED_HEADER:
            raise UnsupportedFlagsError("ID3 tags with extended headers are not supported")
        if flags & _TAG_EXPERIMENTAL:
            raise UnsupportedFlagsError("Experimental ID3 tags are not supported")
        if flags & ~_TAG_KNOWN_FLAGS:
            raise UnsupportedFlagsError("Unknown ID3 tag flags: 0x{0:02X}".format(flags))
        return cls(version, data[4], flags, Syncsafe.decode(data[6:10]))

    def encode(self, size=None):
        """Return the header in ID3v2.3 format.
        If size is given, it replaces the tag size of this header."""
        if size is None:
            size = self.size
        data = bytearray(b"ID3")
        data.append(3)
        data.append(self.revision)
        data.append(self.flags)
        data.extend(Syncsafe.encode(size, width=4))
        return bytes(data)

    @property
    def frame_header_size(self):
        return FRAME22_HEADER_SIZE if self.version == 2 else FRAME23_HEADER_SIZE


class ByteQueue:
    "A FIFO of bytes that have been received but not yet parsed."
    def __init__(self):
        self._data = bytearray()
        self.eof = False

    def __len__(self):
        return len(self._data)

    def append(self, data):
        self._data.extend(data)

    def take(self, length):
        "Remove and return exactly length bytes, or None if not enough are available."
        if len(self._data) < length:
            return None
        return self.take_upto(length)

    def take_upto(self, length):
        "Remove and return at most length bytes."
        data = bytes(self._data[:length])
        del self._data[:length]
        return data


class ReaderState(enum.Enum):
    AWAITING_HEADER = "awaiting header"
    READING_FRAMES = "reading frames"
    AWAITING_PADDING = "awaiting padding"
    DONE = "done"
    FAILED = "failed"


class TagReader:
    """Resumable parser for the tag at the start of a byte stream.

    Parsed frames are stored in the frames dictionary passed in by the
    owning container.  Bytes are delivered with feed(); end() signals the
    end of the stream.  When the tag is complete (or parsing fails), the
    source object is closed and the completion callback is invoked.
    """

    def __init__(self, frames, source=None):
        self.frames = frames
        self.source = source
        self.state = ReaderState.AWAITING_HEADER
        self.header = TagHeader.default()
        self.tag_present = False
        self.bytes_remaining = 0
        self.padding_size = 0
        self.error = None
        self._queue = ByteQueue()
        self._frame = None
        self._callback = None

    @property
    def done(self):
        return self.state in (ReaderState.DONE, ReaderState.FAILED)

    @property
    def region_size(self):
        "Number of bytes the tag occupies at the start of the file."
        if not self.tag_present:
            return 0
        return HEADER_SIZE + self.header.size

    def on_done(self, callback):
        """Register callback(error) to be invoked when reading completes.

        Replaces any previously registered callback.  If reading has
        already completed, callback is invoked immediately.
        """
        self._callback = callback
        if self.done:
            callback(self.error)

    def feed(self, data):
        "Process a new batch of bytes from the stream."
        if self.done:
            return
        self._queue.append(data)
        self._advance()

    def end(self):
        "Signal the end of the stream."
        if self.done:
            return
        self._queue.eof = True
        self._advance()

    def fail(self, error):
        "Abort reading with error."
        if self.done:
            return
        self._fail(error)
        self._notify()

    def _fail(self, error):
        self.error = error
        self.state = ReaderState.FAILED
        self._close()

    def _advance(self):
        # Observer exceptions propagate to the caller.
        try:
            if self.state is ReaderState.AWAITING_HEADER:
                if not self._read_header():
                    return
            while (self.state is ReaderState.READING_FRAMES
                   and self.bytes_remaining > 0
                   and self._read_frame()):
                pass
            if self.state is ReaderState.AWAITING_PADDING:
                self._read_padding()
            if self.state is not ReaderState.DONE and self.bytes_remaining <= 0:
                self.state = ReaderState.DONE
            if self.state is ReaderState.DONE:
                self._close()
            elif self._queue.eof:
                raise TruncatedTagError(
                    "File ends inside the ID3 tag; {0} bytes missing"
                    .format(self.bytes_remaining))
        except Error as e:
            self._fail(e)
        if self.done:
            self._notify()

    def _read_header(self):
        data = self._queue.take(HEADER_SIZE)
        if data is None:
            if not self._queue.eof:
                return False
            data = self._queue.take_upto(HEADER_SIZE)
            if data[0:3] == b"ID3":
                raise TruncatedTagError("File ends inside the ID3 header")
        if data[0:3] != b"ID3":
            # No tag; keep the default header.
            self.state = ReaderState.DONE
            return True
        self.header = TagHeader.decode(data)
        self.tag_present = True
        self.bytes_remaining = self.header.size
        self.state = ReaderState.READING_FRAMES
        return True

    def _read_frame(self):
        "Try to read one frame; return False if more data is needed."
        header_size = self.header.frame_header_size
        if self._frame is None:
            if self.bytes_remaining < header_size:
                # Not enough room left for a frame: the rest is padding.
                self.state = ReaderState.AWAITING_PADDING
                return False
            data = self._queue.take(header_size)
            if data is None:
                return False
            self.bytes_remaining -= header_size
            self._frame = Frame._from_header(data, self.header.version)
            if self._frame.original_size < 0:
                raise FrameError("Negative size for frame {0}".format(self._frame.frameid))
            if self._frame.original_size > self.bytes_remaining:
                raise FrameError("Frame {0} extends beyond the end of the tag"
                                 .format(self._frame.frameid))
            if not self._frame.frameid and not self._frame.is_empty():
                raise FrameError("Missing frame id in non-empty frame header")

        frame = self._frame
        if frame.original_size:
            data = self._queue.take(frame.original_size)
            if data is None:
                return False
            self.bytes_remaining -= frame.original_size
            frame.set_data(data, original=True)
        self._frame = None

        if frame.is_empty():
            self.padding_size += header_size
            self.state = ReaderState.AWAITING_PADDING
        else:
            self.frames[frame.frameid] = frame
        return True

    def _read_padding(self):
        data = self._queue.take_upto(self.bytes_remaining)
        if any(data):
            raise CorruptPaddingError("Non-zero byte found in padding")
        self.padding_size += len(data)
        self.bytes_remaining -= len(data)

    def _close(self):
        if self.source is not None:
            try:
                self.source.close()
            except OSError as e:
                if self.error is None:
                    self.error = TagIOError("Can't close ID3 source: {0}".format(e))
                    self.error.__cause__ = e
                    self.state = ReaderState.FAILED
            self.source = None

    def _notify(self):
        if self._callback is not None:
            self._callback(self.error)
