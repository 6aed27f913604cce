"""Errors raised by the graph model, registry and engine.

Step-level problems (unknown labels, faulting custom code) are never raised;
they surface as failure outcomes in the run diagnostics.
"""


class WorkflowError(Exception):
    """Base class for workflow engine errors."""


class GraphStructureError(WorkflowError, ValueError):
    """The graph violates a structural invariant (duplicate ids, second entry node...)."""


class NodeNotFoundError(WorkflowError, KeyError):
    """A node id does not exist in the graph."""


class GraphNotFoundError(WorkflowError, KeyError):
    """A graph id is not known to the engine."""


class RunInProgressError(WorkflowError):
    """A run was requested while another one is still in flight."""


class RegistryFrozenError(WorkflowError):
    """Attempt to register an action after the registry was frozen."""
