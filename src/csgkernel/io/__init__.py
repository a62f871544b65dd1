"""I/O utilities for csgkernel."""

from .compact import (cag_from_compact_binary, cag_to_compact_binary,
                      csg_from_compact_binary, csg_to_compact_binary)
from .dxf import write_dxf
from .stl import read_stl, write_stl

__all__ = ['write_stl', 'read_stl', 'write_dxf',
           'csg_to_compact_binary', 'csg_from_compact_binary',
           'cag_to_compact_binary', 'cag_from_compact_binary']
