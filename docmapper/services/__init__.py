from .error_trail import ErrorTrail, truncate_message
from .field_binder import FieldBinder, FieldSetterRegistry, get_setter_registry, normalize_field_name
from .rule_resolver import LineGroup, ResolvedRules, RuleResolver

__all__ = [
    "ErrorTrail",
    "truncate_message",
    "FieldBinder",
    "FieldSetterRegistry",
    "get_setter_registry",
    "normalize_field_name",
    "LineGroup",
    "ResolvedRules",
    "RuleResolver",
]
