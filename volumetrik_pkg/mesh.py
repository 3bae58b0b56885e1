"""Triangle mesh of a solid of revolution.

The region's boundaries are re-expressed as (radius, axis position) pairs,
joined into one closed cross-section (outer profile forward, inner profile
reversed) and swept around the rotation axis. Buffers are flat numpy arrays
ready for a GPU renderer: ``float32`` positions/normals/colors and
``uint32`` indices.
"""

from __future__ import annotations

import math

import numpy as np

from .config import ANGULAR_SEGMENTS, HEX_COLOR_REGEX, NORMAL_EPSILON
from .logging_config import get_logger
from .types import AXIS_X, AXIS_Y, ComputedRegion, MeshProfilePoint, RevolutionMesh

logger = get_logger("mesh")


def generate_mesh_profiles(
    region: ComputedRegion, axis: str, axis_value: float = 0.0
) -> tuple[list[MeshProfilePoint], list[MeshProfilePoint]]:
    """Split the region into outer and inner profiles around the axis.

    For ``axis == "x"`` the radii are the distances of the two boundaries
    from ``y = axis_value``; the inner radius collapses to 0 where the axis
    passes through the region. For ``axis == "y"`` both profiles share the
    radius ``|x - axis_value|`` and differ in height.
    """
    outer: list[MeshProfilePoint] = []
    inner: list[MeshProfilePoint] = []

    for i, up in enumerate(region.upper_profile):
        y_lo = region.lower_profile[i].y if i < len(region.lower_profile) else 0.0
        if axis == AXIS_X:
            d1, d2 = abs(up.y - axis_value), abs(y_lo - axis_value)
            axis_inside = min(up.y, y_lo) <= axis_value <= max(up.y, y_lo)
            outer.append(MeshProfilePoint(radius=max(d1, d2), axis_pos=up.x))
            inner.append(
                MeshProfilePoint(radius=0.0 if axis_inside else min(d1, d2), axis_pos=up.x)
            )
        else:
            radius = abs(up.x - axis_value)
            outer.append(MeshProfilePoint(radius=radius, axis_pos=up.y))
            inner.append(MeshProfilePoint(radius=radius, axis_pos=y_lo))

    return outer, inner


def hex_to_rgb(color: str) -> tuple[float, float, float]:
    """Convert ``#rrggbb`` to an RGB triple in [0, 1]."""
    match = HEX_COLOR_REGEX.match(color.strip())
    if match is None:
        raise ValueError(f"Invalid hex colour: {color!r}")
    value = int(match.group(1), 16)
    return ((value >> 16) & 0xFF) / 255.0, ((value >> 8) & 0xFF) / 255.0, (value & 0xFF) / 255.0


def compute_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Smooth per-vertex normals from flat position and index buffers.

    Face normals (unnormalized edge cross products) are summed at each of
    their vertices; sums longer than NORMAL_EPSILON are normalized, shorter
    ones (vertices on the axis) stay as they are.
    """
    verts = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    tris = np.asarray(indices, dtype=np.int64).reshape(-1, 3)

    a, b, c = verts[tris[:, 0]], verts[tris[:, 1]], verts[tris[:, 2]]
    face_normals = np.cross(b - a, c - a)

    normals = np.zeros_like(verts)
    for k in range(3):
        np.add.at(normals, tris[:, k], face_normals)

    lengths = np.linalg.norm(normals, axis=1)
    mask = lengths > NORMAL_EPSILON
    normals[mask] /= lengths[mask][:, None]
    return normals.astype(np.float32).ravel()


def generate_revolution_geometry(
    region: ComputedRegion,
    axis: str,
    axis_value: float = 0.0,
    angular_segments: int = ANGULAR_SEGMENTS,
    angle_extent: float = 2 * math.pi,
    outer_color: str | None = None,
    inner_color: str | None = None,
) -> RevolutionMesh:
    """Sweep the region's closed cross-section around the rotation axis.

    Args:
        region: Region to revolve
        axis: ``"x"`` for ``y = axis_value``, ``"y"`` for ``x = axis_value``
        axis_value: Offset of the rotation axis
        angular_segments: Number of angular steps (ring count minus one)
        angle_extent: Swept angle in radians; values below 2π give a
            partially revolved solid
        outer_color: ``#rrggbb`` for vertices of the outer profile
        inner_color: ``#rrggbb`` for vertices of the inner profile; colours
            are emitted only when both are given

    Returns:
        RevolutionMesh with ``L * (angular_segments + 1)`` vertices and
        ``2 * L * angular_segments`` triangles, where L is the length of the
        closed cross-section

    Raises:
        ValueError: Unknown axis, ``angular_segments < 1`` or a malformed colour
    """
    if axis not in (AXIS_X, AXIS_Y):
        raise ValueError(f"Unknown rotation axis: {axis!r} (expected 'x' or 'y')")
    if angular_segments < 1:
        raise ValueError("angular_segments must be at least 1")

    outer, inner = generate_mesh_profiles(region, axis, axis_value)
    profile = outer + inner[::-1]
    profile_len = len(profile)

    radius = np.array([p.radius for p in profile], dtype=np.float64)
    axis_pos = np.array([p.axis_pos for p in profile], dtype=np.float64)

    # Ring j holds vertices j * L .. j * L + L - 1
    angles = np.arange(angular_segments + 1, dtype=np.float64) / angular_segments * angle_extent
    cos_a = np.cos(angles)[:, None]
    sin_a = np.sin(angles)[:, None]

    along = np.broadcast_to(axis_pos, (angular_segments + 1, profile_len))
    across = axis_value + radius * cos_a
    depth = radius * sin_a
    if axis == AXIS_X:
        verts = np.stack([along, across, depth], axis=-1)
    else:
        verts = np.stack([across, along, depth], axis=-1)
    positions = verts.astype(np.float32).ravel()

    i = np.arange(profile_len, dtype=np.int64)
    next_i = (i + 1) % profile_len
    j = np.arange(angular_segments, dtype=np.int64)[:, None]
    va = j * profile_len + i
    vb = j * profile_len + next_i
    vc = (j + 1) * profile_len + next_i
    vd = (j + 1) * profile_len + i
    quads = np.stack([va, vb, vc, va, vc, vd], axis=-1)
    indices = quads.astype(np.uint32).ravel()

    normals = compute_normals(positions, indices)

    colors = None
    if outer_color is not None and inner_color is not None:
        ring = np.empty((profile_len, 3), dtype=np.float32)
        ring[: len(outer)] = hex_to_rgb(outer_color)
        ring[len(outer) :] = hex_to_rgb(inner_color)
        colors = np.tile(ring, (angular_segments + 1, 1)).ravel()

    logger.debug(
        "Revolution mesh: %d vertices, %d triangles",
        profile_len * (angular_segments + 1),
        len(indices) // 3,
    )
    return RevolutionMesh(positions=positions, indices=indices, normals=normals, colors=colors)
