# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import collections.abc
import io
import os
import re

from warnings import warn

from tnyid3.errors import *
from tnyid3.frameids import is_text_frame_id
from tnyid3.frames import Frame, FRAME23_HEADER_SIZE
from tnyid3.reader import TagReader

import tnyid3.fileutil as fileutil

def read_tag(filename):
    """Read the ID3v2 tag of filename (a path or a binary file object).
    Raises the parse error, if any."""
    container = Container(filename)
    if not container.done:
        raise TruncatedTagError("ID3 tag is not fully available")
    if container.error is not None:
        raise container.error
    return container

def decode_tag(data):
    return read_tag(io.BytesIO(data))

def _is_frame_id(frameid):
    return re.match("^[A-Z][A-Z0-9]{3}$", frameid) is not None


class Container(collections.abc.MutableMapping):
    """The ID3v2 tag at the start of a file, as a mapping of frame ids to frames.

    The tag is read incrementally from source; with a regular file, reading
    completes inside the constructor.  For non-blocking streams, call poll()
    whenever more data may be available, and use on_done() to find out
    when the tag has been read.
    """
    read_size = 64 * 1024

    def __init__(self, source):
        self._frames = dict()
        self._removed = False
        if fileutil.is_filename(source):
            if not os.path.isfile(source):
                raise TagIOError("Container is not a file: {0}".format(source))
            self.filename = source
            try:
                file = open(source, "rb")
            except OSError as e:
                raise TagIOError("Can't open {0}: {1}".format(source, e)) from e
        elif hasattr(source, "read"):
            file = source
            name = getattr(source, "name", None)
            self.filename = name if fileutil.is_filename(name) else None
        else:
            raise TypeError("Unsupported ID3 container type: {0}".format(type(source).__name__))
        self._reader = TagReader(self._frames, file)
        self.poll()

    def poll(self):
        "Read whatever the source can deliver now and continue parsing."
        reader = self._reader
        while not reader.done:
            try:
                data = reader.source.read(self.read_size)
            except BlockingIOError:
                break
            except OSError as e:
                error = TagIOError("Can't read ID3 tag: {0}".format(e))
                error.__cause__ = e
                reader.fail(error)
                break
            if data is None:
                # Nothing available yet
                break
            if data:
                reader.feed(data)
            else:
                reader.end()

    def on_done(self, callback):
        """Register callback(error) to be called once the tag has been read.
        error is None on success.  Only one callback is kept; if reading
        is already complete, callback is called immediately."""
        self._reader.on_done(callback)

    @property
    def header(self):
        return self._reader.header

    @property
    def state(self):
        return self._reader.state

    @property
    def done(self):
        return self._reader.done

    @property
    def error(self):
        return self._reader.error

    @property
    def padding_size(self):
        return self._reader.padding_size

    @property
    def tag_size(self):
        "Size of the original tag, excluding its header."
        return self._reader.header.size

    @property
    def tag_present(self):
        return self._reader.tag_present

    @property
    def region_size(self):
        "Number of bytes the original tag occupies at the start of the file."
        return self._reader.region_size

    # Frame access

    def get_frame_ids(self):
        return list(self._frames)

    def get_frame(self, frameid, create=False):
        """Return the frame for frameid, or None if there is no such frame.
        If create is true, a missing frame is added to the tag."""
        if create and frameid not in self._frames:
            if not _is_frame_id(frameid):
                raise KeyError("Invalid frame id " + repr(frameid))
            self._frames[frameid] = Frame(frameid)
        return self._frames.get(frameid)

    def frames(self):
        return list(self._frames.values())

    def is_changed(self):
        return self._removed or any(frame.changed for frame in self._frames.values())

    # MutableMapping methods
    def __iter__(self):
        return iter(self._frames)

    def __len__(self):
        return len(self._frames)

    def __getitem__(self, key):
        return self._frames[key]

    def __setitem__(self, key, value):
        if isinstance(value, Frame):
            if value.frameid != key:
                raise ValueError("Frame id mismatch: {0} != {1}".format(value.frameid, key))
            if not _is_frame_id(key):
                raise KeyError("Invalid frame id " + repr(key))
            value.changed = True
            self._frames[key] = value
        elif isinstance(value, str):
            if not is_text_frame_id(key):
                raise WrongFrameKindError(
                    "String values are not supported for frame {0}".format(key))
            self.get_frame(key, create=True).set_string(value)
        else:
            raise TypeError("Unsupported frame value: {0!r}".format(value))

    def __delitem__(self, key):
        del self._frames[key]
        self._removed = True

    def __repr__(self):
        return "<{0}: ID3v2.{1} tag with {2} frames>".format(
            type(self).__name__, self.header.version, len(self._frames))

    # Writing

    def write(self, dest=None):
        """Write the tag back to the file it was read from, or into dest.

        Returns False if there was nothing to write.  See TagWriter.
        """
        return TagWriter(self).write(dest)

    def _mark_written(self, written, padding):
        """Update the container after its tag has been rewritten in place.
        written is the list of frames in the new tag."""
        for frame in written:
            frame.version = 3
            frame.original_size = len(frame.data)
        # Frames that were skipped stay as they are, but no longer count
        # as pending changes.
        for frame in self._frames.values():
            frame.changed = False
        self._removed = False
        reader = self._reader
        reader.header = reader.header._replace(version=3)
        reader.padding_size = padding


class TagWriter:
    """Serializes a container as an ID3v2.3 tag.

    Written back to the original file, the new tag must fit into the space
    of the old one; the remaining space becomes padding.  Written to any
    other destination, the new tag gets padding_default bytes of padding,
    followed by the audio data of the original file.
    """
    padding_default = 512

    def __init__(self, container):
        self.container = container

    def frames(self):
        "Return the list of frames to write."
        result = []
        for frame in self.container.frames():
            if not frame.data:
                # Frames with no data are stripped.
                continue
            if not _is_frame_id(frame.frameid):
                warn("Skipping frame {0}, it has no ID3v2.3 equivalent"
                     .format(frame.frameid), IncompatibleFrameWarning)
                continue
            if frame.is_opaque():
                warn("Skipping compressed or encrypted frame {0}"
                     .format(frame.frameid), IncompatibleFrameWarning)
                continue
            result.append(frame)
        return result

    def frame_size(self, frames):
        return sum(FRAME23_HEADER_SIZE + len(frame.data) for frame in frames)

    def encode(self, frames, padding):
        "Return the tag data: header, frames and padding bytes."
        framedata = bytearray().join(frame.encode() for frame in frames)
        # The declared tag size includes the padding (not just the frames),
        # so an in-place rewrite keeps the footprint of the original tag.
        data = bytearray(self.container.header.encode(size=len(framedata) + padding))
        data.extend(framedata)
        data.extend(bytes(padding))
        return bytes(data)

    def write(self, dest=None):
        container = self.container
        if not container.done:
            raise Error("Can't write ID3 tag before it has been read")
        if container.error is not None:
            raise container.error
        in_place = (dest is None
                    or (container.filename is not None
                        and fileutil.same_file(container.filename, dest)))
        if container.filename is None:
            raise TagIOError("ID3 container has no file name")

        if in_place and not container.is_changed():
            return False

        frames = self.frames()
        total_size = self.frame_size(frames)

        if in_place:
            if not container.tag_present or total_size > container.tag_size:
                raise InsufficientTagSpaceError(
                    "Writing to a file without enough pre-existing tag space "
                    "is not supported: {0} bytes needed, {1} available"
                    .format(total_size, container.tag_size))
            padding = container.tag_size - total_size
            self._write_in_place(frames, padding)
            container._mark_written(frames, padding)
        else:
            self._write_relocated(frames, dest)
        return True

    def _write_in_place(self, frames, padding):
        data = self.encode(frames, padding)
        assert len(data) == self.container.region_size
        try:
            with fileutil.suppress_interrupt():
                with open(self.container.filename, "rb+") as file:
                    file.seek(0)
                    file.write(data)
        except OSError as e:
            raise TagIOError("Error writing ID3 tag to {0}: {1}"
                             .format(self.container.filename, e)) from e

    def _write_relocated(self, frames, dest):
        data = self.encode(frames, self.padding_default)
        try:
            with fileutil.opened(dest, "wb") as out:
                out.write(data)
                with open(self.container.filename, "rb") as src:
                    fileutil.copy_tail(src, out, self.container.region_size)
        except OSError as e:
            raise TagIOError("Error writing ID3 tag to {0}: {1}".format(dest, e)) from e
