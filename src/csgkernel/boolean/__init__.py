from .split import (BACK, COPLANAR_BACK, COPLANAR_FRONT, FRONT, SPANNING,
                    SplitResult, split_polygon_by_plane)
from .trees import Node, PolygonTreeNode, Tree

__all__ = ['BACK', 'COPLANAR_BACK', 'COPLANAR_FRONT', 'FRONT', 'SPANNING',
           'SplitResult', 'split_polygon_by_plane',
           'Node', 'PolygonTreeNode', 'Tree']
