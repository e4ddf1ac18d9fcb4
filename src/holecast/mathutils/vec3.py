"""
Pure Python 3D vector math used by the ray caster and the placement code.

Vec3 is a small value type with arithmetic operators and tuple-style
indexing. Host geometry (points, directions) can be passed in as any
3-element sequence; everything is normalised to Vec3 on the way in.

For single vectors pure Python is faster than numpy arrays, which only pay
off in the batched surface index (see hc_numpy_surface_index).
"""
import math

# Below this length a vector is treated as zero
ZERO_LENGTH_TOLERANCE = 1e-10


class Vec3:
    """
    Immutable-by-convention 3D vector.

    Supports +, -, * (scalar), / (scalar), unary -, indexing and iteration,
    so it can be handed to code expecting an (x, y, z) tuple.
    """
    __slots__ = ('x', 'y', 'z')

    def __init__(self, x=0.0, y=0.0, z=0.0):
        try:
            self.x = float(x)
            self.y = float(y)
            self.z = float(z)
        except TypeError:
            # x is a sequence (tuple, list, array, Vec3)
            self.x = float(x[0])
            self.y = float(x[1])
            self.z = float(x[2])

    def __getitem__(self, i):
        if i == 0: return self.x
        if i == 1: return self.y
        if i == 2: return self.z
        raise IndexError(f"Vec3 index {i} out of range")

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __len__(self):
        return 3

    def __repr__(self):
        return f"Vec3({self.x}, {self.y}, {self.z})"

    def __eq__(self, other):
        try:
            return self.x == other[0] and self.y == other[1] and self.z == other[2]
        except (TypeError, IndexError):
            return NotImplemented

    def __hash__(self):
        return hash((self.x, self.y, self.z))

    def __add__(self, other):
        return Vec3(self.x + other[0], self.y + other[1], self.z + other[2])

    __radd__ = __add__

    def __sub__(self, other):
        return Vec3(self.x - other[0], self.y - other[1], self.z - other[2])

    def __rsub__(self, other):
        return Vec3(other[0] - self.x, other[1] - self.y, other[2] - self.z)

    def __mul__(self, scalar):
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        inv = 1.0 / scalar
        return Vec3(self.x * inv, self.y * inv, self.z * inv)

    def __neg__(self):
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other):
        """Dot product."""
        return self.x * other[0] + self.y * other[1] + self.z * other[2]

    def cross(self, other):
        """Cross product."""
        return Vec3(
            self.y * other[2] - self.z * other[1],
            self.z * other[0] - self.x * other[2],
            self.x * other[1] - self.y * other[0]
        )

    def length_sq(self):
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self):
        return math.sqrt(self.length_sq())

    def normalized(self):
        """Return a unit-length copy, or the zero vector if too short to normalise."""
        mag = self.length()
        if mag < ZERO_LENGTH_TOLERANCE:
            return Vec3(0.0, 0.0, 0.0)
        return self / mag

    def is_zero(self):
        return self.length() < ZERO_LENGTH_TOLERANCE

    def to_tuple(self):
        return (self.x, self.y, self.z)


# Tuple-based helpers for code that works with raw host coordinates

def vec3_distance(a, b):
    """Distance between two points."""
    dx, dy, dz = a[0] - b[0], a[1] - b[1], a[2] - b[2]
    return math.sqrt(dx * dx + dy * dy + dz * dz)

def vec3_is_close(a, b, tolerance=1e-9):
    """True if two points coincide within tolerance."""
    return vec3_distance(a, b) <= tolerance
