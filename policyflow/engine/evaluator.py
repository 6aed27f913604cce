from typing import Any, Dict, Optional
import builtins
import logging

from .models import Outcome

logger = logging.getLogger(__name__)


# Builtins visible to custom step code. No file, import or interpreter access.
SAFE_BUILTIN_NAMES = (
    "abs", "all", "any", "bool", "dict", "divmod", "enumerate", "filter",
    "float", "int", "isinstance", "len", "list", "map", "max", "min",
    "print", "range", "repr", "reversed", "round", "set", "sorted", "str",
    "sum", "tuple", "zip",
    "True", "False", "None",
    "Exception", "ArithmeticError", "AssertionError", "KeyError",
    "IndexError", "LookupError", "RuntimeError", "TypeError",
    "ValueError", "ZeroDivisionError",
)


class CustomStepEvaluator:
    """
    Runs the source text of custom steps.

    Each call gets a fresh namespace with a restricted builtins table and no
    reference to the graph, the registry or the engine. Raising is the only
    way for code to report failure; anything raised other than
    KeyboardInterrupt becomes ``Outcome.FAILURE`` and never reaches the engine.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._builtins: Dict[str, Any] = {
            name: getattr(builtins, name) for name in SAFE_BUILTIN_NAMES
        }

    def evaluate(self, code: Optional[str], label: str = "<custom>") -> Outcome:
        if not self.enabled:
            logger.warning(f"Custom code disabled, step '{label}' fails")
            return Outcome.FAILURE

        if not code or not code.strip():
            logger.warning(f"Custom step '{label}' has no code")
            return Outcome.FAILURE

        namespace: Dict[str, Any] = {"__builtins__": dict(self._builtins)}
        try:
            compiled = compile(code, f"<custom step {label}>", "exec")
            exec(compiled, namespace)
        except KeyboardInterrupt:
            raise
        except BaseException as e:
            # Code can reach BaseException through Exception.__base__
            logger.warning(f"Custom step '{label}' raised {type(e).__name__}: {e}")
            return Outcome.FAILURE

        return Outcome.SUCCESS
