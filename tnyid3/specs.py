# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Field specifications for the frame payloads tnyid3 understands.

A frame spec is a tuple of Spec objects, each of which reads one field from
the front of the payload and returns it together with the rest of the data.
Fields are collected into a record; the first field of every spec here is
the text encoding, which later string fields consult.
"""

import abc
from abc import abstractmethod
from types import SimpleNamespace

from tnyid3.errors import *

# The idea for the Spec system comes from Mutagen.

class Spec(metaclass=abc.ABCMeta):
    def __init__(self, name):
        self.name = name

    @abstractmethod
    def read(self, record, data): pass

    def write(self, record, value):
        raise NotImplementedError("{0} fields are read-only".format(type(self).__name__))

class ByteSpec(Spec):
    def read(self, record, data):
        if len(data) < 1:
            raise EOFError()
        return data[0], data[1:]
    def write(self, record, value):
        if not isinstance(value, int):
            raise TypeError("Not a byte")
        if value not in range(256):
            raise ValueError("Invalid byte value")
        return bytes([value])

class BinaryDataSpec(Spec):
    def read(self, record, data):
        return bytes(data), bytes()
    def write(self, record, value):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("Not a byte sequence")
        return bytes(value)

class NullTerminatedStringSpec(Spec):
    def read(self, record, data):
        rawstr, sep, data = bytes(data).partition(b"\x00")
        if not sep:
            raise EOFError()
        return rawstr.decode('iso-8859-1'), data
    def write(self, record, value):
        return value.encode('iso-8859-1') + b"\x00"

class EncodingSpec(ByteSpec):
    "EncodingSpec must be the first spec."
    def read(self, record, data):
        enc, data = super().read(record, data)
        if enc not in range(len(EncodedStringSpec._encodings)):
            raise UnsupportedEncodingError("Unsupported text encoding {0}".format(enc))
        return enc, data

class EncodedStringSpec(Spec):
    """A string in the record's encoding, followed by a terminator.

    Encoding 0 is ISO-8859-1 with a single zero terminator; encoding 1 is
    UTF-16 with a byte order mark, terminated by an aligned zero pair.
    Only little-endian UTF-16 is supported.  A missing terminator means
    the string runs to the end of the payload.
    """
    _encodings = (('iso-8859-1', b"\x00"),
                  ('utf-16-le', b"\x00\x00"))
    preferred_encodings = (0, 1)

    BOM_LE = b"\xff\xfe"
    BOM_BE = b"\xfe\xff"

    terminated = True

    def read(self, record, data):
        enc, term = self._encodings[record.encoding]
        data = bytes(data)
        if len(term) == 1:
            rawstr, sep, data = data.partition(term)
        else:
            if data[0:2] == self.BOM_LE:
                data = data[2:]
            elif data[0:2] == self.BOM_BE:
                raise UnsupportedEncodingError("UTF-16BE strings are not supported")
            index = len(data)
            for i in range(0, len(data) - 1, 2):
                if data[i:i+2] == term:
                    index = i
                    break
            rawstr = data[:index]
            data = data[index+2:]
            if len(rawstr) & 1:
                # Unterminated string with a dangling odd byte
                rawstr = rawstr[:-1]
        return rawstr.decode(enc), data

    def write(self, record, value):
        if not isinstance(value, str):
            raise TypeError("Not a string")
        enc, term = self._encodings[record.encoding]
        data = value.encode(enc)
        if len(term) > 1:
            data = self.BOM_LE + data
        if self.terminated:
            data += term
        return data

class EncodedFullTextSpec(EncodedStringSpec):
    "An encoded string filling the rest of the payload; written without terminator."
    terminated = False


text_framespec = (EncodingSpec("encoding"),
                  EncodedFullTextSpec("text"))

picture_framespec = (EncodingSpec("encoding"),
                     NullTerminatedStringSpec("mime"),
                     ByteSpec("type"),
                     EncodedStringSpec("desc"),
                     BinaryDataSpec("data"))

# ID3v2.2 PIC frames have a fixed three-character image format instead of
# a MIME type.
class FixedStringSpec(Spec):
    def __init__(self, name, length):
        super().__init__(name)
        self.length = length
    def read(self, record, data):
        if len(data) < self.length:
            raise EOFError()
        return bytes(data[:self.length]).decode('iso-8859-1'), data[self.length:]

v22_picture_framespec = (EncodingSpec("encoding"),
                         FixedStringSpec("format", 3),
                         ByteSpec("type"),
                         EncodedStringSpec("desc"),
                         BinaryDataSpec("data"))


def decode_fields(framespec, data):
    """Decode data according to framespec.
    Returns a record with one attribute per spec."""
    record = SimpleNamespace()
    for spec in framespec:
        try:
            val, data = spec.read(record, data)
        except EOFError:
            raise FrameError("Frame data ends before field '{0}'".format(spec.name)) from None
        except UnicodeDecodeError as e:
            raise FrameError("Can't decode field '{0}': {1}".format(spec.name, e)) from e
        setattr(record, spec.name, val)
    return record

def encode_fields(framespec, record):
    """Encode the fields of record according to framespec.

    If record.encoding is None, the preferred encodings are tried in
    order; the first one that can represent every string wins.
    """
    def encode():
        data = bytearray()
        for spec in framespec:
            data.extend(spec.write(record, getattr(record, spec.name)))
        return bytes(data)

    if record.encoding is not None:
        return encode()
    try:
        for encoding in EncodedStringSpec.preferred_encodings:
            try:
                record.encoding = encoding
                return encode()
            except UnicodeEncodeError:
                pass
    finally:
        record.encoding = None
    raise ValueError("Could not encode strings")
