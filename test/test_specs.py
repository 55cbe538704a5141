# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import unittest
from types import SimpleNamespace

from tnyid3.errors import *
from tnyid3.specs import *

class EncodedStringSpecTestCase(unittest.TestCase):
    def read(self, encoding, data, spec=EncodedStringSpec):
        return spec("text").read(SimpleNamespace(encoding=encoding), data)

    def testLatin1(self):
        self.assertEqual(self.read(0, b"abc\x00def"), ("abc", b"def"))
        self.assertEqual(self.read(0, b"caf\xe9"), ("caf\xe9", b""))
        self.assertEqual(self.read(0, b""), ("", b""))

    def testUTF16(self):
        self.assertEqual(self.read(1, b"\xff\xfea\x00b\x00\x00\x00rest"),
                         ("ab", b"rest"))
        # No byte order mark: little-endian is assumed
        self.assertEqual(self.read(1, b"a\x00b\x00"), ("ab", b""))
        # The terminator must be aligned
        self.assertEqual(self.read(1, b"\x00\x01\x00\x00"), ("Ā", b""))

    def testUTF16Unterminated(self):
        self.assertEqual(self.read(1, b"\xff\xfea\x00b"), ("a", b""))

    def testUTF16BigEndian(self):
        self.assertRaises(UnsupportedEncodingError,
                          self.read, 1, b"\xfe\xff\x00a\x00b")

    def testWrite(self):
        record = SimpleNamespace(encoding=0)
        self.assertEqual(EncodedStringSpec("s").write(record, "abc"), b"abc\x00")
        self.assertEqual(EncodedFullTextSpec("s").write(record, "abc"), b"abc")
        record.encoding = 1
        self.assertEqual(EncodedStringSpec("s").write(record, "a"),
                         b"\xff\xfea\x00\x00\x00")
        self.assertEqual(EncodedFullTextSpec("s").write(record, "a"),
                         b"\xff\xfea\x00")
        record.encoding = 0
        self.assertRaises(UnicodeEncodeError,
                          EncodedStringSpec("s").write, record, "ő")

class FieldsTestCase(unittest.TestCase):
    def testTextFrame(self):
        record = decode_fields(text_framespec, b"\x00hello\x00garbage")
        self.assertEqual(record.encoding, 0)
        self.assertEqual(record.text, "hello")

    def testInvalidEncoding(self):
        for enc in (2, 3, 0x80):
            self.assertRaises(UnsupportedEncodingError,
                              decode_fields, text_framespec, bytes([enc]) + b"abc")

    def testEmptyData(self):
        self.assertRaises(FrameError, decode_fields, text_framespec, b"")

    def testPreferredEncoding(self):
        record = SimpleNamespace(encoding=None, text="caf\xe9")
        self.assertEqual(encode_fields(text_framespec, record), b"\x00caf\xe9")
        self.assertIsNone(record.encoding)
        record = SimpleNamespace(encoding=None, text="ő")
        self.assertEqual(encode_fields(text_framespec, record), b"\x01\xff\xfe\x51\x01")

    def testPicture(self):
        data = b"\x00image/png\x00\x03cover\x00\x89PNG\x00\x00"
        pic = decode_fields(picture_framespec, data)
        self.assertEqual(pic.mime, "image/png")
        self.assertEqual(pic.type, 3)
        self.assertEqual(pic.desc, "cover")
        self.assertEqual(pic.data, b"\x89PNG\x00\x00")
        pic.encoding = None
        self.assertEqual(encode_fields(picture_framespec, pic), data)

    def testPictureUTF16Description(self):
        data = b"\x01image/jpeg\x00\x04\xff\xfe\x51\x01\x00\x00JFIF"
        pic = decode_fields(picture_framespec, data)
        self.assertEqual(pic.desc, "ő")
        self.assertEqual(pic.type, 4)
        self.assertEqual(pic.data, b"JFIF")

    def testTruncatedPicture(self):
        self.assertRaises(FrameError, decode_fields, picture_framespec, b"\x00image/png")

    def testMalformedUTF16(self):
        # A lone high surrogate
        with self.assertRaises(FrameError) as cm:
            decode_fields(text_framespec, b"\x01\xff\xfe\x00\xd8")
        self.assertIsInstance(cm.exception.__cause__, UnicodeDecodeError)
        self.assertRaises(FrameError, decode_fields, picture_framespec,
                          b"\x01image/png\x00\x03\xff\xfe\x00\xdc\x00\x00data")

    def testV22Picture(self):
        pic = decode_fields(v22_picture_framespec, b"\x00JPG\x03\x00JFIF")
        self.assertEqual(pic.format, "JPG")
        self.assertEqual(pic.type, 3)
        self.assertEqual(pic.desc, "")
        self.assertEqual(pic.data, b"JFIF")

suite = unittest.TestSuite([
    unittest.TestLoader().loadTestsFromTestCase(EncodedStringSpecTestCase),
    unittest.TestLoader().loadTestsFromTestCase(FieldsTestCase)])

if __name__ == "__main__":
    unittest.main(defaultTest="suite")
