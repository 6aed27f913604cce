"""
Tests for the action registry and the built-in actions.
"""
import logging

import pytest

from policyflow.engine.exceptions import RegistryFrozenError
from policyflow.tools.registry import ActionRegistry, DEFAULT_ACTIONS, create_default_registry


class TestActionRegistry:
    """Registration, lookup and freezing."""

    def test_default_actions_all_succeed(self, registry):
        for name in registry.list_actions():
            assert registry.get(name)() == 1

    def test_default_labels(self, registry):
        assert registry.list_actions() == [name for _, name, _ in DEFAULT_ACTIONS]
        assert registry.has("Start")
        assert registry.has("Condition")

    def test_unknown_label(self, registry):
        assert registry.get("Unregistered Label") is None
        assert not registry.has("Unregistered Label")

    def test_frozen_registry_rejects_registration(self, registry):
        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register("Late Action", lambda: 1)

    def test_unfrozen_registry(self):
        registry = create_default_registry(freeze=False)
        registry.register("Archive Policy", lambda: 1, category="System")

        assert registry.get("Archive Policy")() == 1
        assert registry.palette()["System"][-1] == "Archive Policy"

    def test_palette_groups(self, registry):
        palette = registry.palette()

        assert list(palette) == ["Trigger", "Integration", "Business / Rules", "System", "Logic"]
        assert palette["Trigger"] == ["Start"]
        assert "Send Notification" in palette["System"]

    def test_default_category(self):
        registry = ActionRegistry()
        registry.register("Anything", lambda: 1)
        assert registry.palette() == {"Custom": ["Anything"]}

    @pytest.mark.parametrize("label, message", [
        ("Update Policy Status", "Policy status updated"),
        ("Emit Event", "Event emitted"),
        ("Send Notification", "Notification sent to customer"),
    ])
    def test_side_effect_actions_log(self, registry, caplog, label, message):
        caplog.set_level(logging.INFO, logger="policyflow.tools.registry")

        assert registry.get(label)() == 1
        assert message in caplog.text
