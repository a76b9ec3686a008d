# ==============================================
# docmapper/transformers/transform_chain.py
# ==============================================
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Callable, Dict, List, Optional, Tuple, Union, get_args, get_origin

from docmapper.core.config import MappingSettings, get_settings
from docmapper.core.exceptions import TransformationError
from docmapper.utils.date_utils import parse_datetime, parse_time
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)

NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
TRUE_VALUES = ("true", "1", "yes", "y", "on")
FALSE_VALUES = ("false", "0", "no", "n", "off")
NO_OP_NAMES = ("", "none", "null")


@dataclass
class ChainValue:
    """String flowing through a chain, plus the rendering applied to it so far."""
    text: str
    rendered: Optional[str] = None


@dataclass
class Operation:
    name: str
    func: Callable[["TransformChain", ChainValue, Optional[str]], ChainValue]
    accepts_rendered: bool = True


def unwrap_optional(target_type: Any) -> Any:
    """Optional[int] -> int"""
    if get_origin(target_type) is Union:
        args = [arg for arg in get_args(target_type) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return target_type


def _parse_decimal(text: str) -> Decimal:
    value = text.strip()
    if value.count(",") == 1 and "." not in value:
        value = value.replace(",", ".")
    if not NUMERIC_PATTERN.match(value):
        raise InvalidOperation(value)
    return Decimal(value)


def _render_number(value: ChainValue, places: int, operation: str) -> ChainValue:
    try:
        number = _parse_decimal(value.text)
    except InvalidOperation:
        raise TransformationError(
            f"'{value.text}' is not a number",
            raw_value=value.text,
            operation=operation,
        )
    quantum = Decimal(1).scaleb(-places)
    rounded = number.quantize(quantum, rounding=ROUND_HALF_UP)
    return ChainValue(format(rounded, "f"), rendered="number")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def _uppercase(chain, value, param):
    return ChainValue(value.text.upper(), value.rendered)


def _lowercase(chain, value, param):
    return ChainValue(value.text.lower(), value.rendered)


def _trim(chain, value, param):
    return ChainValue(value.text.strip(), value.rendered)


def _remove_leading_zeros(chain, value, param):
    stripped = value.text.lstrip("0")
    return ChainValue(stripped or "0", value.rendered)


def _date_format(chain, value, param):
    parsed = parse_datetime(value.text)
    if parsed is None:
        raise TransformationError(f"'{value.text}' is not a date", raw_value=value.text, operation="date_format")
    return ChainValue(parsed.strftime(param or chain.settings.date_format), rendered="date")


def _time_format(chain, value, param):
    parsed = parse_time(value.text)
    if parsed is None:
        raise TransformationError(f"'{value.text}' is not a time", raw_value=value.text, operation="time_format")
    return ChainValue(parsed.strftime(param or chain.settings.time_format), rendered="time")


def _datetime_format(chain, value, param):
    parsed = parse_datetime(value.text)
    if parsed is None:
        raise TransformationError(
            f"'{value.text}' is not a date-time", raw_value=value.text, operation="datetime_format"
        )
    return ChainValue(parsed.strftime(param or chain.settings.datetime_format), rendered="datetime")


def _places(param: Optional[str], default: int, operation: str) -> int:
    if param is None:
        return default
    try:
        places = int(param)
    except ValueError:
        raise TransformationError(f"Invalid decimal places '{param}'", operation=operation)
    if places < 0:
        raise TransformationError(f"Invalid decimal places '{param}'", operation=operation)
    return places


def _integer_format(chain, value, param):
    return _render_number(value, 0, "integer_format")


def _currency_format(chain, value, param):
    places = _places(param, chain.settings.currency_places, "currency_format")
    return _render_number(value, places, "currency_format")


def _decimal_format(chain, value, param):
    places = _places(param, chain.settings.decimal_places, "decimal_format")
    return _render_number(value, places, "decimal_format")


OPERATION_REGISTRY: Dict[str, Operation] = {
    "uppercase": Operation("uppercase", _uppercase),
    "upper": Operation("uppercase", _uppercase),
    "lowercase": Operation("lowercase", _lowercase),
    "lower": Operation("lowercase", _lowercase),
    "trim": Operation("trim", _trim),
    "strip": Operation("trim", _trim),

    # Defined on raw source values only: a rendered value may carry a
    # decimal point or date separators the stripping would corrupt
    "remove_leading_zeros": Operation("remove_leading_zeros", _remove_leading_zeros, accepts_rendered=False),

    "date_format": Operation("date_format", _date_format),
    "time_format": Operation("time_format", _time_format),
    "datetime_format": Operation("datetime_format", _datetime_format),

    "integer_format": Operation("integer_format", _integer_format),
    "integer": Operation("integer_format", _integer_format),
    "currency_format": Operation("currency_format", _currency_format),
    "currency": Operation("currency_format", _currency_format),
    "decimal_format": Operation("decimal_format", _decimal_format),
    "decimal": Operation("decimal_format", _decimal_format),
}


def get_supported_operations() -> List[str]:
    """Get list of all supported operation names"""
    return list(OPERATION_REGISTRY.keys())


def is_supported_operation(name: str) -> bool:
    name = (name or "").strip().lower()
    return name in NO_OP_NAMES or name.split(":", 1)[0] in OPERATION_REGISTRY


class TransformChain:
    """
    Interpreter for pipe-delimited transformation chains.

    Operations run left to right on the string value; the result is converted
    to the target type only after the last operation. Order matters:
    'remove_leading_zeros|decimal_format' is valid while the reverse raises,
    because zero stripping is not defined on an already rendered number.
    """

    def __init__(self, settings: Optional[MappingSettings] = None):
        self.settings = settings or get_settings().mapping

    @staticmethod
    def parse(chain_spec: Optional[str]) -> List[Tuple[str, Optional[str]]]:
        """
        Split an operation chain into (operation, parameter) pairs

        Args:
            chain_spec: e.g. 'trim|remove_leading_zeros|decimal_format:4'

        Returns:
            Ordered list of (name, parameter) with no-op entries removed
        """
        steps = []
        if not chain_spec:
            return steps

        for token in chain_spec.split("|"):
            token = token.strip()
            if token.lower() in NO_OP_NAMES:
                continue
            name, _, param = token.partition(":")
            steps.append((name.strip().lower(), param.strip() or None))

        return steps

    def apply(self, raw_value: str, chain_spec: Optional[str]) -> str:
        """
        Run the string operations of a chain

        Raises:
            TransformationError: If an operation is unknown or not defined for the current value
        """
        value = ChainValue(raw_value)

        for name, param in self.parse(chain_spec):
            operation = OPERATION_REGISTRY.get(name)
            if operation is None:
                raise TransformationError(
                    f"Unknown transformation '{name}'. Supported: {get_supported_operations()}",
                    raw_value=raw_value,
                    operation=name,
                )

            if value.rendered and not operation.accepts_rendered:
                raise TransformationError(
                    f"Operation '{operation.name}' cannot follow {value.rendered} rendering "
                    f"(value '{value.text}')",
                    raw_value=raw_value,
                    operation=operation.name,
                )

            try:
                value = operation.func(self, value, param)
            except TransformationError as e:
                e.raw_value = raw_value
                e.details["raw_value"] = raw_value
                raise

        return value.text

    def convert(self, value: str, target_type: Any, raw_value: Optional[str] = None,
                operation: Optional[str] = None) -> Any:
        """
        Convert a transformed string into the target type

        Raises:
            TransformationError: If the value cannot be parsed as target_type
        """
        target_type = unwrap_optional(target_type)
        raw_value = value if raw_value is None else raw_value

        def fail(reason: str) -> TransformationError:
            return TransformationError(
                f"Cannot convert '{value}' to {getattr(target_type, '__name__', target_type)}: {reason}",
                raw_value=raw_value,
                operation=operation,
                target_type=target_type,
            )

        if target_type in (str, Any, None):
            return value

        if target_type is bool:
            lowered = value.strip().lower()
            if lowered in TRUE_VALUES:
                return True
            if lowered in FALSE_VALUES:
                return False
            raise fail("not a boolean")

        if target_type in (int, Decimal, float):
            try:
                number = _parse_decimal(value)
            except InvalidOperation:
                raise fail("not a number")
            if target_type is int:
                return int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))
            if target_type is float:
                return float(number)
            return number

        if target_type is datetime:
            parsed = parse_datetime(value)
            if parsed is None:
                raise fail("not a date-time")
            return parsed

        if target_type is date:
            parsed = parse_datetime(value)
            if parsed is None:
                raise fail("not a date")
            return parsed.date()

        if target_type is time:
            parsed = parse_time(value)
            if parsed is None:
                raise fail("not a time")
            return parsed

        try:
            return target_type(value)
        except (TypeError, ValueError) as e:
            raise fail(str(e))

    def transform_and_convert(self, raw_value: Optional[str], chain_spec: Optional[str],
                              target_type: Any = str) -> Any:
        """
        Apply a transformation chain and convert the result

        Args:
            raw_value: Raw string taken from the document
            chain_spec: Pipe-delimited operations, may be empty
            target_type: Type of the destination field

        Returns:
            Typed value, or None when the raw value is absent or blank
        """
        if raw_value is None or not str(raw_value).strip():
            return None

        raw_value = str(raw_value)
        target_type = unwrap_optional(target_type)
        try:
            steps = self.parse(chain_spec)
            transformed = self.apply(raw_value, chain_spec)
        except TransformationError as e:
            e.target_type = target_type
            e.details["target_type"] = getattr(target_type, "__name__", None)
            raise
        last_operation = steps[-1][0] if steps else None

        return self.convert(transformed, target_type, raw_value=raw_value, operation=last_operation)
