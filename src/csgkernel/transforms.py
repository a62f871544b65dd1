"""Convenience transformations shared by every transformable value.

Classes mixing in :class:`Transformable` only implement
``transform(matrix)``; the helpers below build the matrix.
"""

from csgkernel.plane import Plane
from csgkernel.vector import Vector3D
from csgkernel.xform import (Mirroring, Rotation, RotationX, RotationY, RotationZ,
                             Scale, Translation)

_AXES = ('x', 'y', 'z')


class Transformable:

    def transform(self, matrix):
        raise NotImplementedError

    def mirrored(self, plane: Plane):
        return self.transform(Mirroring(plane))

    def mirrored_x(self):
        return self.mirrored(Plane(Vector3D(1, 0, 0), 0))

    def mirrored_y(self):
        return self.mirrored(Plane(Vector3D(0, 1, 0), 0))

    def mirrored_z(self):
        return self.mirrored(Plane(Vector3D(0, 0, 1), 0))

    def translate(self, v):
        return self.transform(Translation(Vector3D.create(v)))

    def scale(self, f):
        if isinstance(f, (list, tuple, Vector3D)):
            return self.transform(Scale(Vector3D.create(f)))
        return self.transform(Scale(f))

    def rotate_x(self, deg):
        return self.transform(RotationX(deg))

    def rotate_y(self, deg):
        return self.transform(RotationY(deg))

    def rotate_z(self, deg):
        return self.transform(RotationZ(deg))

    def rotate(self, center, axis, deg):
        return self.transform(Rotation(Vector3D.create(axis), deg,
                                       center=Vector3D.create(center)))

    def rotate_euler_angles(self, alpha, beta, gamma, position=(0, 0, 0)):
        """Rotate by gamma about z, beta about x, alpha about z, then
        move to ``position``."""
        m = (Translation(Vector3D.create(position))
             .mul(RotationZ(alpha))
             .mul(RotationX(beta))
             .mul(RotationZ(gamma)))
        return self.transform(m)

    # requires get_bounds(); centers the bounding box on the origin
    # along the given axes (all axes when none are given)
    def center(self, *axes):
        if not axes:
            axes = _AXES
        lo, hi = self.get_bounds()
        offset = [0.0, 0.0, 0.0]
        for i, name in enumerate(_AXES[:len(lo)]):
            if name in axes:
                offset[i] = -(lo[i] + hi[i]) / 2.0
        return self.translate(offset)
