"""
Loading of interface and mapping-rule configuration into the database.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from pydantic import ValidationError
from sqlmodel import Session, select

from docmapper.core.exceptions import MappingConfigurationError
from docmapper.models.interface import Interface, InterfaceCreate
from docmapper.models.mapping_rule import MappingRule, MappingRuleCreate
from docmapper.strategies import is_supported_document_type
from docmapper.transformers.transform_chain import TransformChain, is_supported_operation
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)


def _validate_transformation(rule: MappingRuleCreate) -> None:
    for name, _ in TransformChain.parse(rule.transformation):
        if not is_supported_operation(name):
            raise MappingConfigurationError(
                f"Rule '{rule.name}' uses unknown transformation '{name}'",
                details={"rule": rule.name, "transformation": rule.transformation},
            )


def parse_mapping_config(config: Dict[str, Any]) -> Tuple[InterfaceCreate, List[MappingRuleCreate]]:
    """
    Validate a mapping configuration document

    Args:
        config: {"interface": {...}, "rules": [{...}, ...]}

    Returns:
        Validated interface and rule schemas

    Raises:
        MappingConfigurationError: If the configuration is invalid
    """
    try:
        interface = InterfaceCreate.model_validate(config.get("interface") or {})
        rules = [MappingRuleCreate.model_validate(item) for item in config.get("rules") or []]
    except ValidationError as e:
        raise MappingConfigurationError(f"Invalid mapping configuration: {e}")

    if not is_supported_document_type(interface.interface_type):
        raise MappingConfigurationError(f"Unsupported interface type '{interface.interface_type}'")

    for rule in rules:
        _validate_transformation(rule)

    return interface, rules


def load_mapping_config(session: Session, source: Union[str, Path, Dict[str, Any]],
                        replace: bool = True) -> Interface:
    """
    Create or update an interface and its mapping rules

    Args:
        session: Open database session; committed on success
        source: Path to a JSON file or an already loaded configuration
        replace: Delete the interface's existing rules before loading

    Returns:
        The stored interface
    """
    if isinstance(source, dict):
        config = source
    else:
        try:
            config = json.loads(Path(source).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise MappingConfigurationError(f"Cannot read mapping configuration {source}: {e}")

    interface_data, rules_data = parse_mapping_config(config)

    statement = select(Interface).where(Interface.name == interface_data.name)
    if interface_data.client_id is not None:
        statement = statement.where(Interface.client_id == interface_data.client_id)
    interface = session.exec(statement).first()

    if interface is None:
        interface = Interface(**interface_data.model_dump())
        session.add(interface)
        logger.info(f"Creating interface {interface.name}")
    else:
        for key, value in interface_data.model_dump().items():
            setattr(interface, key, value)
        logger.info(f"Updating interface {interface.name}")

    session.flush()

    if replace:
        existing = session.exec(select(MappingRule).where(MappingRule.interface_id == interface.id)).all()
        for rule in existing:
            session.delete(rule)

    for rule_data in rules_data:
        session.add(MappingRule(
            **rule_data.model_dump(),
            interface_id=interface.id,
            client_id=interface.client_id,
        ))

    session.commit()
    session.refresh(interface)
    logger.info(f"Loaded {len(rules_data)} mapping rules for interface {interface.name}")
    return interface
