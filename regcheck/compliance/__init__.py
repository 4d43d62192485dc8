"""
Policy modules and the contract they share.

Each module encodes one regulatory domain as a set of heuristics over text
or code and reports its findings as a `ModuleResult`.
"""

from .base import PolicyModule
from .cafe import CafePolicy
from .gdpr import GdprPolicy
from .hipaa import HipaaPolicy
from .osha import OshaPolicy
from .privilege import PrivilegePolicy
from .sanctions import SanctionsPolicy

__all__ = [
    "PolicyModule",
    "CafePolicy",
    "GdprPolicy",
    "HipaaPolicy",
    "OshaPolicy",
    "PrivilegePolicy",
    "SanctionsPolicy",
]
