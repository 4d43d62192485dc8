"""
regcheck package bootstrap.

Pluggable heuristic policy modules (energy efficiency, health data,
workplace safety, data protection, legal privilege, sanctions) and the
engine that runs them and merges their findings into one compliance report.
"""

from importlib import metadata


def get_version() -> str:
    """Return the package version if installed, else '0.0.0'."""
    try:
        return metadata.version("regcheck")
    except metadata.PackageNotFoundError:  # pragma: no cover - best effort only
        return "0.0.0"


__all__ = ["get_version"]
