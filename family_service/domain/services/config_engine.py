"""
CONFIG ENGINE
Load, validate, and expose the statutory rule set

RESPONSIBILITIES:
- Load legal_rules.yml
- Validate rule integrity
- Expose a read-only LegalRules object

RULES:
❌ No silent defaults when the file is missing
✅ Fail fast on invalid config
✅ Deterministic output
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from family_service.domain.models import HouseAllocationRule, LegalRules

logger = logging.getLogger(__name__)


# yaml section -> {yaml key: LegalRules field}
_RULE_FIELDS = {
    'rounding': {
        'money_quantum': 'money_quantum',
        'percentage_places': 'percentage_places',
        'rounding_tolerance': 'rounding_tolerance',
    },
    'dependency': {
        's29_min_support_months': 's29_min_support_months',
        's29_min_coverage_pct': 's29_min_coverage_pct',
        'enhanced_min_coverage_pct': 'enhanced_min_coverage_pct',
        'enhanced_min_support_months': 'enhanced_min_support_months',
        'support_income_ceiling_ratio': 'support_income_ceiling_ratio',
        'full_dependency_pct': 'full_dependency_pct',
        'partial_dependency_pct': 'partial_dependency_pct',
        'non_priority_min_pct': 'non_priority_min_pct',
    },
    'provision': {
        'needs_factor': 'provision_needs_factor',
        'lump_sum_months': 'lump_sum_months',
    },
    'guardianship': {
        'majority_age': 'majority_age',
        'max_age': 'guardian_max_age',
        'min_age_gap': 'guardian_min_age_gap',
    },
}

_INT_FIELDS = {
    'percentage_places',
    's29_min_support_months',
    'enhanced_min_support_months',
    'lump_sum_months',
    'majority_age',
    'guardian_max_age',
    'guardian_min_age_gap',
}


class ConfigEngine:
    """
    Configuration Engine
    Single source of truth for succession rule constants
    """

    def __init__(self, config_dir: Path, filename: str = "legal_rules.yml"):
        self.config_dir = Path(config_dir)
        self.filename = filename
        self._raw: Dict[str, Any] = None
        self._legal_rules: LegalRules = None
        self._allocation_rule: HouseAllocationRule = None

    @classmethod
    def from_settings(cls, settings) -> "ConfigEngine":
        """Build from Settings.LEGAL_RULES_PATH; env allocation rule wins over the file"""
        path = Path(settings.LEGAL_RULES_PATH)
        engine = cls(path.parent, path.name)
        engine.load_all(allocation_rule_override=settings.POLYGAMOUS_ALLOCATION_RULE)
        return engine

    def load_all(self, allocation_rule_override: Optional[str] = None) -> None:
        """Load and validate the rule file"""
        rules_file = self.config_dir / self.filename
        if not rules_file.exists():
            raise FileNotFoundError(f"Legal rules config not found: {rules_file}")

        with open(rules_file, 'r') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Invalid legal rules format in {rules_file}. Expected a mapping.")

        self._raw = data
        self._legal_rules = self._build_rules(data)

        rule_name = allocation_rule_override or data.get('polygamy', {}).get('allocation_rule')
        if rule_name is None:
            raise ValueError("polygamy.allocation_rule is required")
        try:
            self._allocation_rule = HouseAllocationRule(str(rule_name).upper())
        except ValueError:
            raise ValueError(f"Unknown polygamous allocation rule: {rule_name}")

        logger.info(
            "Loaded legal rules %s from %s (allocation rule %s)",
            data.get('version', 'unversioned'),
            rules_file,
            self._allocation_rule.value,
        )

    @staticmethod
    def _build_rules(data: Dict[str, Any]) -> LegalRules:
        kwargs = {}
        for section, fields in _RULE_FIELDS.items():
            values = data.get(section)
            if not isinstance(values, dict):
                raise ValueError(f"Missing legal rules section: {section}")
            unknown = set(values) - set(fields)
            if unknown:
                raise ValueError(f"Unknown keys in {section}: {sorted(unknown)}")
            for key, field_name in fields.items():
                if key not in values:
                    raise ValueError(f"Missing legal rule: {section}.{key}")
                raw = values[key]
                if field_name in _INT_FIELDS:
                    if not isinstance(raw, int) or isinstance(raw, bool):
                        raise ValueError(f"{section}.{key} must be an integer, got {raw!r}")
                    kwargs[field_name] = raw
                else:
                    kwargs[field_name] = Decimal(str(raw))

        # LegalRules.__post_init__ enforces the cross-field invariants
        return LegalRules(**kwargs)

    # Public getters

    @property
    def legal_rules(self) -> LegalRules:
        if self._legal_rules is None:
            raise RuntimeError("Config not loaded. Call load_all() first")
        return self._legal_rules

    @property
    def allocation_rule(self) -> HouseAllocationRule:
        if self._allocation_rule is None:
            raise RuntimeError("Config not loaded. Call load_all() first")
        return self._allocation_rule

    @property
    def rules_version(self) -> str:
        if self._raw is None:
            raise RuntimeError("Config not loaded. Call load_all() first")
        return str(self._raw.get('version', 'unversioned'))

    def get_rule(self, *keys) -> Any:
        """Get raw rule value by nested keys"""
        if self._raw is None:
            raise RuntimeError("Config not loaded. Call load_all() first")

        value = self._raw
        for key in keys:
            value = value[key]
        return value
