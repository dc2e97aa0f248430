"""
In-memory store for mapping rules and configurations.

Rules keep insertion order; that order is what conversion uses for
first-match-wins. Defaults are seeded by an explicit, idempotent call.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, List, Optional

from .models import (
    MappingConfiguration,
    MappingConfigurationCreate,
    MappingConfigurationUpdate,
    MappingRule,
    MappingRuleCreate,
    MappingRuleUpdate,
)
from .rules import DEFAULT_CONFIGURATION, DEFAULT_RULES

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemStorage:
    def __init__(self):
        self._lock = threading.Lock()
        self._rules: Dict[str, MappingRule] = {}
        self._configurations: Dict[str, MappingConfiguration] = {}
        self._initialized = False

    def initialize_defaults(self) -> bool:
        """Seed the default configuration and rules once. Returns True if seeding happened."""
        with self._lock:
            if self._initialized:
                return False
            self._initialized = True

        self.create_configuration(MappingConfigurationCreate(**DEFAULT_CONFIGURATION))
        for rule in DEFAULT_RULES:
            self.create_rule(MappingRuleCreate(**rule))
        logger.info("seeded %d default mapping rules", len(DEFAULT_RULES))
        return True

    # --- mapping rules ---

    def list_rules(self) -> List[MappingRule]:
        with self._lock:
            return list(self._rules.values())

    def load_active_rules(self) -> List[MappingRule]:
        return [rule for rule in self.list_rules() if rule.is_active]

    def get_rule(self, rule_id: str) -> Optional[MappingRule]:
        with self._lock:
            return self._rules.get(rule_id)

    def create_rule(self, data: MappingRuleCreate) -> MappingRule:
        rule = MappingRule(id=_new_id(), **data.model_dump())
        with self._lock:
            self._rules[rule.id] = rule
        logger.debug("created mapping rule %s", rule.id)
        return rule

    def update_rule(self, rule_id: str, data: MappingRuleUpdate) -> Optional[MappingRule]:
        with self._lock:
            existing = self._rules.get(rule_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=data.model_dump(exclude_unset=True, exclude_none=True))
            self._rules[rule_id] = updated
        logger.debug("updated mapping rule %s", rule_id)
        return updated

    def delete_rule(self, rule_id: str) -> bool:
        with self._lock:
            return self._rules.pop(rule_id, None) is not None

    def clear_rules(self) -> int:
        with self._lock:
            count = len(self._rules)
            self._rules.clear()
        logger.info("cleared %d mapping rules", count)
        return count

    # --- configurations ---

    def list_configurations(self) -> List[MappingConfiguration]:
        with self._lock:
            return list(self._configurations.values())

    def get_configuration(self, config_id: str) -> Optional[MappingConfiguration]:
        with self._lock:
            return self._configurations.get(config_id)

    def create_configuration(self, data: MappingConfigurationCreate) -> MappingConfiguration:
        config = MappingConfiguration(id=_new_id(), **data.model_dump())
        with self._lock:
            self._configurations[config.id] = config
        return config

    def update_configuration(
        self, config_id: str, data: MappingConfigurationUpdate
    ) -> Optional[MappingConfiguration]:
        with self._lock:
            existing = self._configurations.get(config_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=data.model_dump(exclude_unset=True, exclude_none=True))
            self._configurations[config_id] = updated
        return updated

    def delete_configuration(self, config_id: str) -> bool:
        with self._lock:
            return self._configurations.pop(config_id, None) is not None

    def get_default_configuration(self) -> Optional[MappingConfiguration]:
        with self._lock:
            for config in self._configurations.values():
                if config.is_default:
                    return config
        return None
