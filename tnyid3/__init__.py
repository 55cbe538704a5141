# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

import tnyid3.frames
import tnyid3.reader
import tnyid3.tags

from tnyid3.errors import *
from tnyid3.frameids import *
from tnyid3.frames import Frame, Picture
from tnyid3.reader import TagHeader, TagReader, ReaderState
from tnyid3.tags import Container, TagWriter, read_tag, decode_tag

version = (0, 1, 0)
versionstr = ".".join((str(v) for v in version))
