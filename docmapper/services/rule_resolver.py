# ==============================================
# docmapper/services/rule_resolver.py
# ==============================================
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from docmapper.models.mapping_rule import MappingRule
from docmapper.processors.path_evaluator import PathEvaluator, normalize_path
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LineGroup:
    """Rules applied to the same set of line nodes."""
    parent_path: str
    rules: Tuple[MappingRule, ...]


@dataclass(frozen=True)
class ResolvedRules:
    header_rules: Tuple[MappingRule, ...] = ()
    line_groups: Tuple[LineGroup, ...] = field(default_factory=tuple)

    @property
    def line_rule_count(self) -> int:
        return sum(len(group.rules) for group in self.line_groups)


def _by_priority(rules: Iterable[MappingRule]) -> List[MappingRule]:
    # Stable: equal priorities keep configuration order
    return sorted(rules, key=lambda rule: -(rule.priority or 0))


class RuleResolver:
    """
    Turns the flat rule list of an interface into a header rule-set and one
    rule-set per line group. Rules are read, never modified.
    """

    def __init__(self, evaluator: Optional[PathEvaluator] = None):
        self.evaluator = evaluator or PathEvaluator()

    @staticmethod
    def _has_source(rule: MappingRule) -> bool:
        return bool(rule.source_path and rule.source_path.strip())

    def resolve_header_rules(self, rules: Iterable[MappingRule]) -> List[MappingRule]:
        """
        Active header rules, highest priority first

        Rules without a source path only take part when they carry a default value.
        """
        selected = []
        for rule in rules:
            if not rule.is_active:
                logger.debug(f"Skipping inactive header rule {rule.name}")
                continue
            if not self._has_source(rule) and rule.default_value is None:
                logger.debug(f"Skipping header rule {rule.name}: no source path and no default")
                continue
            selected.append(rule)
        return _by_priority(selected)

    def resolve_line_groups(self, rules: Iterable[MappingRule]) -> Dict[str, List[MappingRule]]:
        """
        Group active line rules by the parent path of their source path

        Args:
            rules: Line rules of one interface

        Returns:
            Parent path -> rules, in order of first appearance. Rules inside a
            group are ordered by priority.
        """
        groups: Dict[str, List[MappingRule]] = {}

        for rule in rules:
            if not rule.is_active:
                logger.debug(f"Skipping inactive line rule {rule.name}")
                continue
            if not self._has_source(rule):
                logger.debug(f"Skipping line rule {rule.name}: empty source path")
                continue

            parent = normalize_path(self.evaluator.parent_path(rule.source_path))
            if not parent:
                logger.debug(f"Skipping line rule {rule.name}: '{rule.source_path}' has no parent path")
                continue

            groups.setdefault(parent, []).append(rule)

        return {parent: _by_priority(group) for parent, group in groups.items()}

    def partition(self, header_rules: Iterable[MappingRule],
                  line_rules: Iterable[MappingRule]) -> ResolvedRules:
        """Resolve both rule-sets of one document type."""
        line_groups = tuple(
            LineGroup(parent, tuple(group))
            for parent, group in self.resolve_line_groups(line_rules).items()
        )
        return ResolvedRules(
            header_rules=tuple(self.resolve_header_rules(header_rules)),
            line_groups=line_groups,
        )
