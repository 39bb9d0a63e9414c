"""
Argument errors raised by stream positioning.
"""

class InvalidWhenceError(ValueError):
    """Raised when seek() gets a whence other than SEEK_SET, SEEK_CUR or SEEK_END."""
    pass

class InvalidOffsetError(ValueError):
    """Raised when a seek or positional read would use a negative offset."""
    pass
