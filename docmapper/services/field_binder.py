# ==============================================
# docmapper/services/field_binder.py
# ==============================================
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Type

from sqlmodel import SQLModel

from docmapper.core.exceptions import FieldBindingError, MappingConfigurationError, TransformationError
from docmapper.models.mapping_rule import MappingRule
from docmapper.transformers.transform_chain import TransformChain, unwrap_optional
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)

# Identity, ownership and audit columns are never targeted by rules
UNMAPPED_FIELDS = frozenset({"id", "header_id", "client_id", "created_at", "updated_at"})


def normalize_field_name(name: str) -> str:
    """'asnNumber', 'ASN_NUMBER' and 'asn_number' all become 'asnnumber'."""
    return re.sub(r"[_\-\s]", "", name or "").lower()


@dataclass(frozen=True)
class FieldSetter:
    name: str
    target_type: Any
    assign: Callable[[Any, Any], None]


def _make_setter(attribute: str) -> Callable[[Any, Any], None]:
    def assign(record: Any, value: Any) -> None:
        setattr(record, attribute, value)
    return assign


class FieldSetterRegistry:
    """
    Table of typed setters for one record type, keyed by normalised field name.
    """

    def __init__(self, model: Type[SQLModel]):
        self.model = model
        self._setters: Dict[str, FieldSetter] = {}

        for name, info in model.model_fields.items():
            if name in UNMAPPED_FIELDS:
                continue

            key = normalize_field_name(name)
            if key in self._setters:
                raise MappingConfigurationError(
                    f"{model.__name__} fields '{self._setters[key].name}' and '{name}' "
                    f"are indistinguishable to mapping rules"
                )
            self._setters[key] = FieldSetter(name, unwrap_optional(info.annotation), _make_setter(name))

    def lookup(self, field_name: str) -> Optional[FieldSetter]:
        return self._setters.get(normalize_field_name(field_name))

    def field_names(self) -> List[str]:
        return [setter.name for setter in self._setters.values()]

    def __contains__(self, field_name: str) -> bool:
        return self.lookup(field_name) is not None

    def __len__(self) -> int:
        return len(self._setters)


@lru_cache(maxsize=None)
def get_setter_registry(model: Type[SQLModel]) -> FieldSetterRegistry:
    """Setter table for a record type, built once per type."""
    return FieldSetterRegistry(model)


class FieldBinder:
    """Applies one mapping rule to one record."""

    def __init__(self, chain: Optional[TransformChain] = None):
        self.chain = chain or TransformChain()

    def bind(self, record: SQLModel, rule: MappingRule, raw_value: Optional[str]) -> bool:
        """
        Transform a raw value and assign it to the rule's target field

        Args:
            record: Header or line record
            rule: Mapping rule naming the target field and transformation
            raw_value: Value found in the document, None when the path matched nothing

        Returns:
            True when a value was assigned, False when there was nothing to assign

        Raises:
            FieldBindingError: If the field is unknown, a required value is
                missing, or transformation or assignment fails
        """
        setter = get_setter_registry(type(record)).lookup(rule.target_field)
        if setter is None:
            logger.debug(
                f"Known {type(record).__name__} fields: {get_setter_registry(type(record)).field_names()}"
            )
            raise FieldBindingError(
                rule.target_field,
                f"{type(record).__name__} has no field '{rule.target_field}'",
                rule=rule,
            )

        if raw_value is None or not raw_value.strip():
            raw_value = rule.default_value

        if raw_value is None or not raw_value.strip():
            if rule.required:
                raise FieldBindingError(
                    setter.name,
                    f"Required field '{rule.target_field}' has no value at '{rule.source_path}'",
                    rule=rule,
                )
            return False

        try:
            value = self.chain.transform_and_convert(raw_value, rule.transformation, setter.target_type)
        except TransformationError as e:
            raise FieldBindingError(
                setter.name,
                f"Field '{rule.target_field}': {e.message}",
                rule=rule,
                cause=e,
            ) from e

        try:
            setter.assign(record, value)
        except (TypeError, ValueError, AttributeError) as e:
            raise FieldBindingError(
                setter.name,
                f"Cannot assign field '{rule.target_field}': {e}",
                rule=rule,
                cause=e,
            ) from e

        logger.debug(f"Bound {type(record).__name__}.{setter.name} from rule {rule.name}")
        return True
