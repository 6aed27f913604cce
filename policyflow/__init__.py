"""
Policy Workflow Engine Package

Assemble policy and insurance business steps into a directed graph and run
it deterministically, one step at a time.
"""

__version__ = "1.0.0"
