# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

"""Frame identifiers understood by tnyid3.

Identifiers are the canonical four-character ID3v2.3 names.  Tags read
from ID3v2.2 files have their three-character frame ids translated with
from_v22_id() before they are entered in a container.
"""

import enum

ACCOMPANIMENT = "TPE2"          # also used as album artist
ALBUM = "TALB"
ARTIST = "TPE1"
ATTACHED_PICTURE = "APIC"
COMMENTS = "COMM"
COMPOSER = "TCOM"
CONDUCTOR = "TPE3"
CONTENT_TYPE = "TCON"
DATE = "TDAT"
DISC = "TPOS"
GROUP_TITLE = "TIT1"
LYRICIST = "TEXT"
IS_COMPILATION = "TCMP"
SUB_TITLE = "TIT3"
TITLE = "TIT2"
TRACK = "TRCK"
YEAR = "TYER"

# iTunes writes its sort order frames (TST, TSA, ...) into v2.2 tags;
# they are folded into the corresponding main frames.
_v22_ids = {
    "TT1": GROUP_TITLE,
    "TT2": TITLE,
    "TT3": SUB_TITLE,
    "TP1": ARTIST,
    "TP2": ACCOMPANIMENT,
    "TP3": CONDUCTOR,
    "TCM": COMPOSER,
    "TXT": LYRICIST,
    "TCO": CONTENT_TYPE,
    "TAL": ALBUM,
    "TRK": TRACK,
    "TPA": DISC,
    "TYE": YEAR,
    "TDA": DATE,
    "COM": COMMENTS,
    "TCP": IS_COMPILATION,
    "TST": TITLE,
    "TSA": ALBUM,
    "TSP": ARTIST,
    "TS2": ACCOMPANIMENT,
    "TSC": COMPOSER,
    "PIC": ATTACHED_PICTURE,
    }

def from_v22_id(frameid):
    "Return the ID3v2.3 equivalent of the ID3v2.2 frameid, or None."
    return _v22_ids.get(frameid)

def is_text_frame_id(frameid):
    return frameid.startswith("T")

def is_picture_frame_id(frameid):
    return frameid == ATTACHED_PICTURE


class PictureType(enum.IntEnum):
    "Attached picture (APIC) types"
    OTHER = 0
    FILE_ICON_32X32 = 1
    FILE_ICON_OTHER = 2
    COVER_FRONT = 3
    COVER_BACK = 4
    LEAFLET_PAGE = 5
    MEDIA_LABEL = 6
    LEAD_ARTIST = 7
    ARTIST = 8
    CONDUCTOR = 9
    GROUP = 10
    COMPOSER = 11
    LYRICIST = 12
    LOCATION = 13
    RECORDING = 14
    PERFORMANCE = 15
    SCREEN_CAPTURE = 16
    BRIGHT_FISH = 17
    ILLUSTRATION = 18
    BAND_LOGO = 19
    STUDIO_LOGO = 20

picture_types = (
    "Other", "32x32 icon", "Other icon", "Front Cover", "Back Cover",
    "Leaflet", "Media", "Lead artist", "Artist", "Conductor",
    "Band/Orchestra", "Composer", "Lyricist/text writer",
    "Recording Location", "Recording", "Performance", "Screen capture",
    "A bright coloured fish", "Illustration", "Band/artist",
    "Publisher/Studio")

# Image formats of ID3v2.2 PIC frames
_v22_image_formats = {
    "JPG": "image/jpeg",
    "PNG": "image/png",
    }

def mime_from_v22_format(format):
    "Return the MIME type for the three-letter image format of a PIC frame."
    format = format.strip("\x00 ").upper()
    if format in _v22_image_formats:
        return _v22_image_formats[format]
    return "image/" + format.lower() if format else ""

__all__ = ["ACCOMPANIMENT", "ALBUM", "ARTIST", "ATTACHED_PICTURE", "COMMENTS",
           "COMPOSER", "CONDUCTOR", "CONTENT_TYPE", "DATE", "DISC",
           "GROUP_TITLE", "LYRICIST", "IS_COMPILATION", "SUB_TITLE", "TITLE",
           "TRACK", "YEAR",
           "PictureType", "picture_types", "from_v22_id",
           "is_text_frame_id", "is_picture_frame_id", "mime_from_v22_format"]
