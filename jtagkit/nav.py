"""Attitude and strapdown navigation equations on an ellipsoidal Earth."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .matrices import (
    Matrix,
    mat_dot_vector,
    mat_sum,
    quat_divide,
    quat_product,
)

ECCENTRICITY = 0.00335289186  # flattening, 1/298.25
EARTH_RADIUS = 6.378138e6  # metres
EARTH_RATE = 7.292115e-5  # rad/s
GRAVITY = 9.780327  # m/s^2
FOOT = 0.3048  # metres


@dataclass
class SensorData:
    """One sample of GPS, air data, heading and IMU readings."""

    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    airspeed: float = 0.0
    heading: float = 0.0
    x_accel: float = 0.0
    y_accel: float = 0.0
    z_accel: float = 0.0
    roll_rate: float = 0.0
    pitch_rate: float = 0.0
    yaw_rate: float = 0.0


@dataclass
class Attitude:
    """Roll, pitch and yaw angles in radians."""

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0


def radius_east(lat: float) -> float:
    """Radius of curvature in the east direction at latitude ``lat``."""
    s = math.sin(lat)
    return EARTH_RADIUS * (1 + ECCENTRICITY * s * s)


def radius_north(lat: float) -> float:
    """Radius of curvature in the north direction at latitude ``lat``."""
    s = math.sin(lat)
    return EARTH_RADIUS * (1 - ECCENTRICITY * (2 - 3 * s * s))


def radius_earth(lat: float) -> float:
    """Geocentric Earth radius at latitude ``lat``."""
    s = math.sin(lat)
    return EARTH_RADIUS * (1 - ECCENTRICITY * s * s)


def foot_to_meter(value: float) -> float:
    """Convert feet to metres."""
    return value * FOOT


def _vector(values: Sequence[float], size: int, what: str) -> Sequence[float]:
    if len(values) < size:
        raise ValueError(f"{what} needs {size} components")
    return values


def euler_to_dcm(euler: Sequence[float]) -> Matrix:
    """Direction cosine matrix for roll, pitch and yaw angles."""
    roll, pitch, yaw = _vector(euler, 3, "euler angles")[:3]
    c_phi, s_phi = math.cos(roll), math.sin(roll)
    c_the, s_the = math.cos(pitch), math.sin(pitch)
    c_psi, s_psi = math.cos(yaw), math.sin(yaw)
    return [
        [c_the * c_psi, c_the * s_psi, -s_the],
        [
            s_phi * s_the * c_psi - c_phi * s_psi,
            s_phi * s_the * s_psi + c_phi * c_psi,
            s_phi * c_the,
        ],
        [
            c_phi * s_the * c_psi + s_phi * s_psi,
            c_phi * s_the * s_psi - s_phi * c_psi,
            c_phi * c_the,
        ],
    ]


def dcm_to_quat(dcm: Matrix) -> list[float]:
    """Quaternion (scalar first) from a direction cosine matrix."""
    q1 = 0.5 * math.sqrt(1 + dcm[0][0] + dcm[1][1] + dcm[2][2])
    return [
        q1,
        (dcm[2][1] - dcm[1][2]) / (4 * q1),
        (dcm[0][2] - dcm[2][0]) / (4 * q1),
        (dcm[1][0] - dcm[0][1]) / (4 * q1),
    ]


def euler_to_quat(euler: Sequence[float]) -> list[float]:
    """Quaternion (scalar first) for roll, pitch and yaw angles."""
    roll, pitch, yaw = _vector(euler, 3, "euler angles")[:3]
    cr, sr = math.cos(roll * 0.5), math.sin(roll * 0.5)
    cp, sp = math.cos(pitch * 0.5), math.sin(pitch * 0.5)
    cy, sy = math.cos(yaw * 0.5), math.sin(yaw * 0.5)
    return [
        cr * cp * cy + sr * sp * sy,
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
    ]


def quat_to_dcm(quat: Sequence[float]) -> Matrix:
    """Direction cosine matrix for a quaternion (scalar first)."""
    al, qx, qy, qz = _vector(quat, 4, "quaternion")[:4]
    return [
        [al * al + qx * qx - qy * qy - qz * qz, 2 * (qx * qy + al * qz), 2 * (qx * qz - qy * al)],
        [2 * (qx * qy - qz * al), al * al - qx * qx + qy * qy - qz * qz, 2 * (qy * qz + al * qx)],
        [2 * (qx * qz + al * qy), 2 * (qy * qz - al * qx), al * al - qx * qx - qy * qy + qz * qz],
    ]


def quat_to_euler(quat: Sequence[float]) -> list[float]:
    """Roll, pitch and yaw angles for a quaternion (scalar first)."""
    q0, q1, q2, q3 = _vector(quat, 4, "quaternion")[:4]
    m23 = 2 * (q2 * q3 + q0 * q1)
    m33 = q0 * q0 - q2 * q2 - q1 * q1 + q3 * q3
    m13 = 2 * (q1 * q3 - q2 * q0)
    m12 = 2 * (q1 * q2 - q0 * q3)
    m11 = q1 * q1 + q0 * q0 - q3 * q3 - q2 * q2
    roll = math.atan2(m23, m33)
    pitch = math.atan2(-m13, math.sqrt(max(0.0, 1 - m13 * m13)))
    yaw = math.atan2(m12, m11)
    return [roll, pitch, yaw]


def dcm_angular(gyro: Sequence[float]) -> Matrix:
    """4x4 quaternion rate matrix for body angular rates ``gyro``."""
    wx, wy, wz = (g * 0.5 for g in _vector(gyro, 3, "gyro rates")[:3])
    return [
        [0.0, -wx, -wy, -wz],
        [wx, 0.0, wz, -wy],
        [wy, -wz, 0.0, wx],
        [wz, wy, -wx, 0.0],
    ]


def dcm_angular_ned(nav: Sequence[float]) -> Matrix:
    """4x4 quaternion rate matrix for Earth and transport rate.

    ``nav`` is (v_north, v_east, v_down, latitude, longitude, altitude).
    """
    vn, ve, _, lat, _, alt = _vector(nav, 6, "navigation state")[:6]
    dot_psi = ve / ((radius_east(lat) + alt) * math.cos(lat))
    dot_lambda = -vn / (radius_north(lat) + alt)
    wx = 0.5 * (EARTH_RATE + dot_psi) * math.cos(lat)
    wy = 0.5 * dot_lambda
    wz = 0.5 * (EARTH_RATE + dot_psi) * math.sin(lat)
    return [
        [0.0, wx, wy, wz],
        [-wx, 0.0, wz, -wy],
        [-wy, -wz, 0.0, wx],
        [-wz, wy, -wx, 0.0],
    ]


def runge_kutta_attitude(
    dcm: Matrix,
    gyro: Sequence[float],
    nav: Sequence[float],
    quat: Sequence[float],
    delta: float,
) -> list[float]:
    """Advance the attitude quaternion by one step of length ``delta``.

    The body and navigation rate matrices are accumulated onto ``dcm`` to form
    the rate matrix used by a fourth-order Runge-Kutta step.
    """
    rates = mat_sum(dcm_angular(gyro), dcm_angular_ned(nav), dcm)
    start = list(_vector(quat, 4, "quaternion")[:4])

    def stage(q: Sequence[float]) -> list[float]:
        return [delta * v for v in mat_dot_vector(rates, q)]

    k1 = stage(start)
    k2 = stage([s + 0.5 * k for s, k in zip(start, k1)])
    k3 = stage([s + 0.5 * k for s, k in zip(start, k2)])
    k4 = mat_dot_vector(rates, [s + k for s, k in zip(start, k3)])
    return [
        s + (a + 2 * b + 2 * c + delta * d) / 6
        for s, a, b, c, d in zip(start, k1, k2, k3, k4)
    ]


def nav_equations(accel_ned: Sequence[float], nav: Sequence[float]) -> list[float]:
    """Time derivative of the navigation state.

    ``accel_ned`` is a quaternion whose vector part holds the specific force
    in north, east, down; ``nav`` is (v_n, v_e, v_d, lat, lon, alt).
    """
    _, asn, ase, asd = _vector(accel_ned, 4, "acceleration quaternion")[:4]
    vn, ve, vd, lat, _, alt = _vector(nav, 6, "navigation state")[:6]
    sin_lat, cos_lat, tan_lat = math.sin(lat), math.cos(lat), math.tan(lat)
    transport = ve / (radius_east(lat) + alt) * tan_lat
    rn = radius_north(lat) + alt
    return [
        asn + vn / rn * vd - (2 * EARTH_RATE * sin_lat + transport) * ve,
        ase
        + (2 * EARTH_RATE * sin_lat + transport) * vn
        + (2 * EARTH_RATE * cos_lat + transport) * vd,
        asd
        - (2 * EARTH_RATE * cos_lat + transport) * ve
        - vn / rn * vn
        + GRAVITY
        * (1 + 0.0052884 * sin_lat * sin_lat)
        * (1 - 2 * alt / radius_earth(lat)),
        vn / rn,
        ve / ((radius_earth(lat) + alt) * cos_lat),
        -vd,
    ]


def runge_kutta_navigation(
    accel: Sequence[float],
    nav: Sequence[float],
    quat: Sequence[float],
    delta: float,
) -> list[float]:
    """Advance the navigation state by one step of length ``delta``.

    The body acceleration is rotated into the navigation frame with ``quat``.
    Every stage is evaluated at the starting state, and in the first three
    stages only the velocity and latitude terms are scaled by ``delta``.
    """
    ax, ay, az = _vector(accel, 3, "acceleration")[:3]
    state = list(_vector(nav, 6, "navigation state")[:6])
    accel_body = [0.0, ax, ay, az]
    accel_ned = quat_product(quat, quat_divide(accel_body, quat))

    rate = nav_equations(accel_ned, state)
    scaled = [delta * v if i < 4 else v for i, v in enumerate(rate)]
    k1 = k2 = k3 = scaled
    k4 = rate
    return [
        s + (a + 2 * b + 2 * c + delta * d) / 6
        for s, a, b, c, d in zip(state, k1, k2, k3, k4)
    ]