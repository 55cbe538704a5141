# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Class definitions for ID3v2 frames."""

import collections
import struct
from types import SimpleNamespace
from warnings import warn

from tnyid3.errors import *
from tnyid3.conversion import *
from tnyid3.specs import *
from tnyid3.frameids import *

_FRAME23_FORMAT_COMPRESSED = 0x0080
_FRAME23_FORMAT_ENCRYPTED = 0x0040
_FRAME23_FORMAT_GROUP = 0x0020
_FRAME23_FORMAT_MASK = 0x00E0

_FRAME23_HEADER = struct.Struct("!4siH")

FRAME22_HEADER_SIZE = 6
FRAME23_HEADER_SIZE = 10

Picture = collections.namedtuple("Picture", "type data mime description")

class Frame:
    """A single ID3v2 frame, keyed by its ID3v2.3 frame id.

    The payload is kept as raw bytes; the typed accessors decode and
    encode it on demand.  Frames are always written in ID3v2.3 format, so
    a frame that was read from an older tag is considered changed.
    """
    def __init__(self, frameid, original_size=0, flags=0, version=3):
        self.frameid = frameid
        self.original_size = original_size
        self.flags = flags
        self.version = version
        self.data = None
        self.changed = version != 3

    @classmethod
    def _from_header(cls, header, version):
        "Create a frame from an ID3v2.2 or ID3v2.3 frame header."
        if version == 2:
            rawid = header[0:3]
            frameid = ""
            if any(rawid):
                frameid = rawid.decode("ASCII", "replace")
                frameid = from_v22_id(frameid) or frameid
            return cls(frameid, Int8.decode(header[3:6]), 0, version)
        else:
            (rawid, size, flags) = _FRAME23_HEADER.unpack(bytes(header))
            frameid = rawid.decode("ASCII", "replace") if any(rawid) else ""
            if flags & _FRAME23_FORMAT_MASK:
                warn("Frame {0} uses unsupported format flags 0x{1:X}; "
                     "its data is kept verbatim".format(frameid, flags), FrameWarning)
            return cls(frameid, size, flags, version)

    def is_empty(self):
        "True if the frame header was all zeros, i.e. the start of padding."
        return not self.frameid and not self.original_size and not self.flags

    def is_text_frame(self):
        return is_text_frame_id(self.frameid)

    def is_picture_frame(self):
        return is_picture_frame_id(self.frameid)

    def is_opaque(self):
        "True if the payload is compressed, encrypted or grouped."
        return bool(self.flags & _FRAME23_FORMAT_MASK)

    def set_data(self, data, original=False):
        """Set the raw payload of this frame.

        With original=True, data is the payload as read from the file; it
        must match the size declared in the frame header.
        """
        data = bytes(data)
        if original:
            if len(data) != self.original_size:
                raise DataSizeMismatchError(
                    "Frame {0}: {1} bytes of data, {2} expected".format(
                        self.frameid, len(data), self.original_size))
            if self.version == 2 and self.is_picture_frame():
                try:
                    data = self._upgrade_v22_picture(data)
                except (FrameError, ValueError) as e:
                    warn("Can't convert ID3v2.2 picture frame: {0}".format(e), FrameWarning)
            self.changed = self.version != 3
        else:
            self.changed = True
        self.data = data

    def _upgrade_v22_picture(self, data):
        pic = decode_fields(v22_picture_framespec, data)
        pic.mime = mime_from_v22_format(pic.format)
        return encode_fields(picture_framespec, pic)

    def _check_data(self, kind, check):
        if not check():
            raise WrongFrameKindError(
                "{0} values are not supported for frame {1}".format(kind, self.frameid))
        if self.data is None:
            raise FrameError("Frame {0} has no data".format(self.frameid))
        if self.is_opaque():
            raise FrameError("Frame {0} is compressed or encrypted".format(self.frameid))

    # Text information frames

    def get_string(self):
        "Return the text of a text information frame."
        self._check_data("String", self.is_text_frame)
        return decode_fields(text_framespec, self.data).text

    def set_string(self, value):
        """Set the text of a text information frame.

        ISO-8859-1 is used if it can represent value, UTF-16 otherwise.
        """
        if not self.is_text_frame():
            raise WrongFrameKindError(
                "String values are not supported for frame {0}".format(self.frameid))
        record = SimpleNamespace(encoding=None, text=value)
        self.set_data(encode_fields(text_framespec, record))

    # Attached picture frames

    def get_picture(self):
        "Return the contents of an attached picture frame as a Picture."
        self._check_data("Picture", self.is_picture_frame)
        pic = decode_fields(picture_framespec, self.data)
        return Picture(_picture_type(pic.type), pic.data, pic.mime, pic.desc)

    def get_picture_type(self):
        self._check_data("Picture", self.is_picture_frame)
        data = self.data
        for i in range(1, len(data) - 1):
            if data[i] == 0:
                return _picture_type(data[i + 1])
        raise FrameError("Picture type not found in frame {0}".format(self.frameid))

    def set_picture(self, picture_type, image, mime="", description=""):
        """Set the contents of an attached picture frame.

        The description is stored in ISO-8859-1 if possible, in UTF-16
        otherwise; the MIME type is always ISO-8859-1.
        """
        if not self.is_picture_frame():
            raise WrongFrameKindError(
                "Picture values are not supported for frame {0}".format(self.frameid))
        if int(picture_type) not in range(len(picture_types)):
            raise ValueError("Invalid picture type {0!r}".format(picture_type))
        record = SimpleNamespace(encoding=None,
                                 mime=mime or "",
                                 type=int(picture_type),
                                 desc=description or "",
                                 data=image)
        self.set_data(encode_fields(picture_framespec, record))

    # Writing

    def encode(self):
        "Return this frame in ID3v2.3 format, or an empty byte string if it has no data."
        if not self.data:
            return bytes()
        rawid = self.frameid.encode("ASCII")
        if len(rawid) != 4:
            raise ValueError("Invalid ID3v2.3 frame id {0!r}".format(self.frameid))
        return _FRAME23_HEADER.pack(rawid, len(self.data), 0) + self.data

    def __repr__(self):
        data = self.data
        if data is None:
            desc = "no data"
        else:
            desc = "{0} bytes of data {1!r}{2}".format(
                len(data), data[:20], "..." if len(data) > 20 else "")
        return "<{0} {1}: {2}{3}>".format(type(self).__name__, self.frameid, desc,
                                          ", changed" if self.changed else "")

    def __str__(self):
        flag = "*" if self.changed else " "
        try:
            if self.is_text_frame():
                value = repr(self.get_string())
            elif self.is_picture_frame():
                pic = self.get_picture()
                value = "{0}, desc={1!r}, mime={2!r}: {3} bytes".format(
                    _picture_type_name(pic.type), pic.description, pic.mime, len(pic.data))
            else:
                value = "<{0} bytes>".format(len(self.data or b""))
        except FrameError as e:
            value = "ERROR " + str(e)
        return "{0}{1}({2})".format(flag, self.frameid, value)

def _picture_type(value):
    if value in range(len(picture_types)):
        return PictureType(value)
    return value

def _picture_type_name(value):
    if value in range(len(picture_types)):
        return "{0}({1})".format(int(value), picture_types[value])
    return "{0}(?)".format(value)
