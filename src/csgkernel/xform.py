## generalized matrix transformation operations for 3D homogeneous
## coordinates in csgkernel

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2025 csgkernel contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import cos, sin, sqrt, radians

from csgkernel.constants import EPS

## a matrix is represented as a list of four four-element rows.  Points
## are column vectors: transforming p computes M p, so translations
## live in the last column.  Composition follows the same rule:
## A.mul(B) applies B first, then A.

## angles are in degrees throughout, as in the rest of csgkernel.


def _isgoodnum(x):
    return (not isinstance(x, bool)) and isinstance(x, (int, float))


def _dot4(a, b):
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2] + a[3]*b[3]


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self, a=None):
        self.m = [[1.0, 0.0, 0.0, 0.0],
                  [0.0, 1.0, 0.0, 0.0],
                  [0.0, 0.0, 1.0, 0.0],
                  [0.0, 0.0, 0.0, 1.0]]

        if isinstance(a, Matrix):
            for i in range(4):
                self.setrow(i, a.getrow(i))

        elif isinstance(a, (tuple, list)):
            if len(a) == 4 and all(isinstance(r, (tuple, list)) and len(r) == 4 for r in a):
                for i in range(4):
                    for j in range(4):
                        self.set(i, j, a[i][j])
            elif len(a) == 16:
                for i in range(4):
                    for j in range(4):
                        self.set(i, j, a[i*4+j])
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not None:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0], self.m[1],
                                            self.m[2], self.m[3])

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.m == other.m

    #return value indexed by i,j
    def get(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i, j))
        return self.m[i][j]

    #set value indexed by i,j
    def set(self, i, j, x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i, j))
        if not _isgoodnum(x):
            raise ValueError('bad element in matrix: {}'.format(x))
        self.m[i][j] = float(x)

    def getrow(self, i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return list(self.m[i])

    def getcol(self, j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j], self.m[1][j], self.m[2][j], self.m[3][j]]

    def setrow(self, i, x):
        if len(x) != 4:
            raise ValueError('bad non-vector passed to setrow: {}'.format(x))
        for j in range(4):
            self.set(i, j, x[j])

    def transpose(self):
        return Matrix([self.getcol(j) for j in range(4)])

    # matrix multiply.  If x is a matrix, compute MX.  If x is a
    # 4-vector, compute Mx. If x is a scalar, compute xM.

    def mul(self, x):
        if isinstance(x, Matrix):
            result = Matrix()
            for i in range(4):
                for j in range(4):
                    result.m[i][j] = _dot4(self.m[i], x.getcol(j))
            return result
        elif isinstance(x, (list, tuple)) and len(x) == 4:
            return [_dot4(self.m[i], x) for i in range(4)]
        elif _isgoodnum(x):
            return Matrix([[e*x for e in row] for row in self.m])

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    # transform a 3D point (w = 1), dividing through by w when the
    # matrix is projective
    def transform_point(self, p):
        v = self.mul([p[0], p[1], p[2], 1.0])
        if v[3] != 1.0 and v[3] != 0.0:
            return (v[0]/v[3], v[1]/v[3], v[2]/v[3])
        return (v[0], v[1], v[2])

    # transform a direction (w = 0), ignoring translation
    def transform_direction(self, d):
        v = self.mul([d[0], d[1], d[2], 0.0])
        return (v[0], v[1], v[2])

    def determinant3(self):
        m = self.m
        return (m[0][0]*(m[1][1]*m[2][2] - m[1][2]*m[2][1]) -
                m[0][1]*(m[1][0]*m[2][2] - m[1][2]*m[2][0]) +
                m[0][2]*(m[1][0]*m[2][1] - m[1][1]*m[2][0]))

    def is_mirroring(self):
        """True if the linear part of the matrix flips handedness, in
        which case polygon windings must be reversed"""
        return self.determinant3() < 0


def _unit_axis(axis):
    m = sqrt(axis[0]*axis[0] + axis[1]*axis[1] + axis[2]*axis[2])
    if m < EPS:
        raise ValueError('zero-length rotation axis not allowed')
    return (axis[0]/m, axis[1]/m, axis[2]/m)


# return the generalized 4x4 arbitrary axis rotation matrix, rotating
# by angle degrees about axis through center (default origin)
def Rotation(axis, angle, center=None, inverse=False):
    ux, uy, uz = _unit_axis(axis)

    if inverse:
        angle *= -1.0
    rad = radians(angle % 360.0)

    cang = cos(rad)
    cmin = 1.0 - cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin - uz*sang, ux*uz*cmin + uy*sang, 0],
         [uy*ux*cmin + uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang, 0],
         [uz*ux*cmin - uy*sang, uz*uy*cmin + ux*sang, cang + uz*uz*cmin, 0],
         [0, 0, 0, 1]]

    if center is None:
        return Matrix(R)
    c = (center[0], center[1], center[2])
    return Translation(c).mul(Matrix(R)).mul(Translation(c, inverse=True))


def RotationX(angle):
    return Rotation((1, 0, 0), angle)


def RotationY(angle):
    return Rotation((0, 1, 0), angle)


def RotationZ(angle):
    return Rotation((0, 0, 1), angle)


def Translation(delta, inverse=False):
    dx, dy, dz = delta[0], delta[1], delta[2]
    if inverse:
        dx, dy, dz = -dx, -dy, -dz
    T = [[1, 0, 0, dx],
         [0, 1, 0, dy],
         [0, 0, 1, dz],
         [0, 0, 0, 1]]
    return Matrix(T)


def Scale(x, y=None, z=None, inverse=False):
    if _isgoodnum(x):
        sx = x
        if _isgoodnum(y) and _isgoodnum(z):
            sy = y
            sz = z
        else:
            sy = sz = x
    elif isinstance(x, (list, tuple)) or hasattr(x, 'x'):
        sx, sy, sz = x[0], x[1], x[2]
    else:
        raise ValueError('bad scaling values passed to Scale: {}'.format(x))

    if inverse:
        sx = 1.0/sx
        sy = 1.0/sy
        sz = 1.0/sz

    S = [[sx, 0, 0, 0],
         [0, sy, 0, 0],
         [0, 0, sz, 0],
         [0, 0, 0, 1.0]]
    return Matrix(S)


# reflection through plane n.p = w, with n the plane's unit normal
def Mirroring(plane):
    nx, ny, nz = plane.normal.x, plane.normal.y, plane.normal.z
    w = plane.w
    M = [[1.0 - 2.0*nx*nx, -2.0*nx*ny, -2.0*nx*nz, 2.0*nx*w],
         [-2.0*ny*nx, 1.0 - 2.0*ny*ny, -2.0*ny*nz, 2.0*ny*w],
         [-2.0*nz*nx, -2.0*nz*ny, 1.0 - 2.0*nz*nz, 2.0*nz*w],
         [0, 0, 0, 1]]
    return Matrix(M)
