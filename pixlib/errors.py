# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Error classes raised by the pixel format and raster code

Everything here is raised synchronously, at the point of the call that
failed, and before anything has been modified. There is no recovery or
retrying anywhere in the library.

Two conditions which look like errors are deliberately not errors:
regions lying partly or wholly outside a raster are clipped (possibly
to nothing), and un-premultiplying a pixel whose alpha is zero yields
zero for every color channel.

"""


class PixlibError (Exception):
    """Base class for all the errors raised by pixlib"""


class OutOfBounds (PixlibError, IndexError):
    """Indexed pixel access outside a raster's dimensions.

    Raised by `pixlib.raster.Raster.pixel_at()` and friends. Coordinates
    are never clamped, and negative coordinates never wrap around the
    way Python sequence indices do.

    """

    def __init__(self, x, y, width, height):
        msg = "pixel (%d, %d) is outside a %dx%d raster" % (
            x, y, width, height,
        )
        super(OutOfBounds, self).__init__(msg)
        self.x = x
        self.y = y


class AllocationError (PixlibError):
    """Indicates a failure to construct a required internal object.

    In general, if one of these is raised as a response to another
    exception, log that error with (yourmodule.logger.exception()) with
    programmer-focussed diagnostic info first.

    """


class SizeOverflow (AllocationError, MemoryError):
    """Requested raster dimensions exceed addressable storage.

    Raised at construction time only. The raster is never partially
    constructed. The limit is `pixlib.settings.max_raster_bytes()`.

    """

    def __init__(self, width, height, nbytes=None):
        if nbytes is None:
            msg = "cannot allocate a %dx%d raster" % (width, height)
        else:
            msg = "a %dx%d raster needs %d bytes, which is too many" % (
                width, height, nbytes,
            )
        super(SizeOverflow, self).__init__(msg)
        self.width = width
        self.height = height


class FormatMismatch (PixlibError, ValueError):
    """An operation received data in a format it cannot work with.

    Compositing needs premultiplied alpha and linear gamma for both of
    its operands, and buffers handed to a raster must be exactly the
    size its format implies. The check always happens before any pixel
    is written.

    """
