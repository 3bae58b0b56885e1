"""Volumetrik package: curve parsing, region building, volume of revolution and meshes."""

__all__ = [
    "config",
    "evaluator",
    "latex",
    "diagnostics",
    "curves",
    "inverse",
    "intersections",
    "region",
    "volume",
    "bounds",
    "mesh",
    "presets",
    "session",
    "cli",
    "types",
    "api",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "parse_curves",
    "compute",
    "evaluate_expression",
]
