# Copyright (c) 2009, Karoly Lorentey  <karoly@lorentey.hu>

class Error(Exception): pass

class Warning(Error, UserWarning): pass

class FrameWarning(Warning): pass
class IncompatibleFrameWarning(FrameWarning): pass

class TagError(Error, ValueError): pass
class UnsupportedVersionError(TagError): pass
class UnsupportedFlagsError(TagError): pass
class MalformedSizeError(TagError): pass
class CorruptPaddingError(TagError): pass
class TruncatedTagError(TagError): pass

class FrameError(Error): pass
class WrongFrameKindError(FrameError, TypeError): pass
class DataSizeMismatchError(FrameError, ValueError): pass
class UnsupportedEncodingError(FrameError): pass

class InsufficientTagSpaceError(Error): pass
class TagIOError(Error, OSError): pass
