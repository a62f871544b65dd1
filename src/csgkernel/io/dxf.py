"""
DXF export of 2D areas.

Every side of the area is written as a LINE entity using the ezdxf
library.

Copyright (c) 2025 csgkernel contributors
All rights reserved (MIT License)
"""

from pathlib import Path

import ezdxf

from csgkernel.cag import CAG


def write_dxf(cag: CAG, output_path, layer: str = 'PATHS') -> Path:
    """Export ``cag`` to a DXF file.

    Args:
        cag: the area to export
        output_path: path of the DXF file; ``.dxf`` is appended when the
            path has no suffix
        layer: DXF layer the lines are placed on (default 'PATHS')

    Returns:
        The path written to.
    """
    path = Path(output_path)
    if not path.suffix:
        path = path.with_suffix('.dxf')

    doc = ezdxf.new(dxfversion='R2010', setup=False)
    if layer not in doc.layers:
        doc.layers.new(layer, dxfattribs={'color': 7})
    msp = doc.modelspace()
    for side in cag.sides:
        p0 = side.vertex0.pos
        p1 = side.vertex1.pos
        msp.add_line((p0.x, p0.y), (p1.x, p1.y), dxfattribs={'layer': layer})
    doc.saveas(str(path))
    return path
