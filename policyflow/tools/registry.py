from typing import Callable, Dict, List, Optional
import logging

from policyflow.engine.exceptions import RegistryFrozenError

logger = logging.getLogger(__name__)

Handler = Callable[[], int]


class ActionRegistry:
    """Registry of built-in workflow actions, keyed by step label"""

    def __init__(self):
        """Initialize an empty, writable registry."""
        self.actions: Dict[str, Handler] = {}
        self.categories: Dict[str, str] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, name: str, func: Handler, category: str = "Custom") -> None:
        """Register a handler under a step label."""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register '{name}': registry is frozen")
        self.actions[name] = func
        self.categories[name] = category

    def freeze(self) -> "ActionRegistry":
        """Make the registry read-only for the rest of the process."""
        self._frozen = True
        return self

    def get(self, name: str) -> Optional[Handler]:
        """Retrieve a handler by label, None when the label is unknown."""
        return self.actions.get(name)

    def has(self, name: str) -> bool:
        return name in self.actions

    def list_actions(self) -> List[str]:
        """Get list of all registered action labels."""
        return list(self.actions.keys())

    def palette(self) -> Dict[str, List[str]]:
        """Action labels grouped by category, in registration order."""
        grouped: Dict[str, List[str]] = {}
        for name in self.actions:
            grouped.setdefault(self.categories[name], []).append(name)
        return grouped


# Default action implementations. They stand in for real service calls and
# must not touch the graph.

def start() -> int:
    return 1


def call_payment_gateway() -> int:
    return 1


def call_esignature_service() -> int:
    return 1


def call_risk_evaluation_service() -> int:
    return 1


def call_third_party_api() -> int:
    return 1


def execute_underwriting_rule() -> int:
    return 1


def invoke_rating_engine() -> int:
    return 1


def validate_policy() -> int:
    return 1


def update_policy_status() -> int:
    logger.info("Policy status updated")
    return 1


def update_transaction_status() -> int:
    return 1


def persist_data() -> int:
    return 1


def emit_event() -> int:
    logger.info("Event emitted")
    return 1


def send_notification() -> int:
    logger.info("Notification sent to customer")
    return 1


def condition() -> int:
    # Placeholder step, no branching semantics
    return 1


DEFAULT_ACTIONS = (
    ("Trigger", "Start", start),
    ("Integration", "Call Payment Gateway", call_payment_gateway),
    ("Integration", "Call eSignature Service", call_esignature_service),
    ("Integration", "Call Risk Evaluation Service", call_risk_evaluation_service),
    ("Integration", "Call Third-Party API", call_third_party_api),
    ("Business / Rules", "Execute Underwriting Rule", execute_underwriting_rule),
    ("Business / Rules", "Invoke Rating Engine", invoke_rating_engine),
    ("Business / Rules", "Validate Policy", validate_policy),
    ("Business / Rules", "Update Policy Status", update_policy_status),
    ("Business / Rules", "Update Transaction Status", update_transaction_status),
    ("System", "Persist Data", persist_data),
    ("System", "Emit Event", emit_event),
    ("System", "Send Notification", send_notification),
    ("Logic", "Condition", condition),
)


def create_default_registry(freeze: bool = True) -> ActionRegistry:
    """Build the registry of built-in policy actions."""
    registry = ActionRegistry()
    for category, name, func in DEFAULT_ACTIONS:
        registry.register(name, func, category=category)
    if freeze:
        registry.freeze()
    return registry
