# This file is part of pixlib.
# Copyright (C) 2026 by the pixlib Development Team
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Typed pixel formats, raster storage and Porter-Duff compositing.

The modules, leaf first:

* `pixlib.channel`: channel precisions (8 bit, 16 bit, float)
* `pixlib.gamma`, `pixlib.alpha`: gamma and alpha policy tags
* `pixlib.color`: color models, converting through a linear RGB hub
* `pixlib.format`: pixel formats, pixels, and format conversion
* `pixlib.helpers`: the `Region` rectangle
* `pixlib.raster`: owned pixel grids of one format
* `pixlib.compositing`: Porter-Duff operators and the compositor
* `pixlib.palette`: color tables for indexed data

"""

__version__ = "0.4.0"
