"""Small dense matrix and quaternion helpers built on plain Python lists."""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence

Matrix = list[list[float]]
Quaternion = list[float]


class MatrixKind(enum.IntEnum):
    """Ways of filling a new matrix."""

    ZEROS = 0
    ONES = 1
    IDENTITY = 2
    UNDEFINED = 3


def _shape(matrix: Sequence[Sequence[float]]) -> tuple[int, int]:
    rows = len(matrix)
    cols = len(matrix[0]) if rows else 0
    if any(len(row) != cols for row in matrix):
        raise ValueError("matrix rows differ in length")
    return rows, cols


def fill_matrix(rows: int, cols: int, kind: MatrixKind | int) -> Matrix:
    """Return a ``rows`` x ``cols`` matrix filled according to ``kind``.

    Any kind other than zeros, ones or identity fills element (j, i) with
    ``(j+1)*10 + i+1``, which makes the positions easy to recognise.
    """
    if rows < 0 or cols < 0:
        raise ValueError("matrix dimensions must not be negative")
    try:
        kind = MatrixKind(kind)
    except ValueError:
        kind = MatrixKind.UNDEFINED
    if kind is MatrixKind.ZEROS:
        return [[0.0] * cols for _ in range(rows)]
    if kind is MatrixKind.ONES:
        return [[1.0] * cols for _ in range(rows)]
    if kind is MatrixKind.IDENTITY:
        return [[1.0 if i == j else 0.0 for i in range(cols)] for j in range(rows)]
    return [[float((j + 1) * 10 + i + 1) for i in range(cols)] for j in range(rows)]


def mat_sum(a: Matrix, b: Matrix, acc: Matrix) -> Matrix:
    """Return ``acc + a + b`` element by element; ``acc`` is accumulated, not replaced."""
    shape = _shape(a)
    if _shape(b) != shape or _shape(acc) != shape:
        raise ValueError("matrices must have the same shape")
    return [
        [c + x + y for c, x, y in zip(row_c, row_a, row_b)]
        for row_c, row_a, row_b in zip(acc, a, b)
    ]


def mat_dot(a: Matrix, b: Matrix) -> Matrix:
    """Return the matrix product ``a @ b``."""
    _, inner = _shape(a)
    rows_b, _ = _shape(b)
    if inner != rows_b:
        raise ValueError("inner matrix dimensions do not agree")
    columns = list(zip(*b))
    return [[sum(x * y for x, y in zip(row, col)) for col in columns] for row in a]


def mat_cross(a: Matrix, b: Matrix) -> Matrix:
    """Return the cross product of two 3x1 column vectors as a 3x1 column vector."""
    if len(a) < 3 or len(b) < 3:
        raise ValueError("cross product needs three-element column vectors")
    ax, ay, az = (row[0] for row in a[:3])
    bx, by, bz = (row[0] for row in b[:3])
    return [
        [ay * bz - az * by],
        [az * bx - ax * bz],
        [ax * by - ay * bx],
    ]


def mat_dot_vector(a: Matrix, vector: Sequence[float]) -> list[float]:
    """Return the product of matrix ``a`` and the column ``vector``."""
    _, cols = _shape(a)
    if len(vector) != cols:
        raise ValueError("vector length does not match matrix columns")
    return [sum(x * v for x, v in zip(row, vector)) for row in a]


def norm(vector: Sequence[float]) -> float:
    """Return the Euclidean length of ``vector``."""
    return math.sqrt(sum(v * v for v in vector))


def _quat(q: Sequence[float]) -> tuple[float, float, float, float]:
    if len(q) != 4:
        raise ValueError("a quaternion has four components")
    return q[0], q[1], q[2], q[3]


def quat_sum(q1: Sequence[float], q2: Sequence[float]) -> Quaternion:
    """Return the component-wise sum of two quaternions."""
    return [x + y for x, y in zip(_quat(q1), _quat(q2))]


def quat_product(q1: Sequence[float], q2: Sequence[float]) -> Quaternion:
    """Return the Hamilton product ``q1 * q2`` (scalar part first)."""
    a0, a1, a2, a3 = _quat(q1)
    b0, b1, b2, b3 = _quat(q2)
    return [
        a0 * b0 - a1 * b1 - a2 * b2 - a3 * b3,
        a0 * b1 + a1 * b0 + a2 * b3 - a3 * b2,
        a0 * b2 - a1 * b3 + a2 * b0 + a3 * b1,
        a0 * b3 + a1 * b2 - a2 * b1 + a3 * b0,
    ]


def quat_inverse(q: Sequence[float]) -> Quaternion:
    """Return the inverse of ``q``; raises ZeroDivisionError for the zero quaternion."""
    q0, q1, q2, q3 = _quat(q)
    mag = q0 * q0 + q1 * q1 + q2 * q2 + q3 * q3
    return [q0 / mag, -q1 / mag, -q2 / mag, -q3 / mag]


def quat_divide(q1: Sequence[float], q2: Sequence[float]) -> Quaternion:
    """Return ``q1 * inverse(q2)``."""
    return quat_product(q1, quat_inverse(q2))


def format_matrix(matrix: Matrix) -> str:
    """Render ``matrix`` with six decimals per element, one ``\\n\\r``-terminated line per row."""
    return "".join(
        "".join(f"{value:f} " for value in row) + "\n\r" for row in matrix
    )