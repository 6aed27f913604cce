"""
Workflow definitions

Pre-built workflow graphs for common policy operations.
"""

from .policy_issuance import create_policy_issuance_workflow, POLICY_ISSUANCE_STEPS

__all__ = [
    "create_policy_issuance_workflow",
    "POLICY_ISSUANCE_STEPS"
]
