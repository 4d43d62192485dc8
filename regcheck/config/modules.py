"""
Built-in policy module variants, keyed by the names they register under.
"""

from __future__ import annotations

from typing import Dict

from regcheck.compliance import (
    CafePolicy,
    GdprPolicy,
    HipaaPolicy,
    OshaPolicy,
    PrivilegePolicy,
    SanctionsPolicy,
)
from regcheck.services.orchestrator import ModuleFactory

# Registration order of the default engine
MODULE_CATALOGUE: Dict[str, ModuleFactory] = {
    "cafe": CafePolicy,
    "hipaa": HipaaPolicy,
    "osha": OshaPolicy,
    "gdpr": GdprPolicy,
    "attorney_client_privilege": PrivilegePolicy,
    "us_sanctions": SanctionsPolicy,
}

DEFAULT_MODULE_NAMES = tuple(MODULE_CATALOGUE)

__all__ = ["MODULE_CATALOGUE", "DEFAULT_MODULE_NAMES"]
