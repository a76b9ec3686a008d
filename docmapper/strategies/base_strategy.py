# ==============================================
# docmapper/strategies/base_strategy.py
# ==============================================
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Type

from lxml import etree
from sqlmodel import SQLModel

from docmapper.core.config import MappingSettings, get_settings
from docmapper.core.enums import LineDiscovery, ProcessingState, ProcessingStatus
from docmapper.core.exceptions import (
    AppException,
    FieldBindingError,
    PathEvaluationError,
    PersistenceBoundaryError,
    RecordValidationError,
)
from docmapper.domain.repositories.document_repository import DocumentRepository
from docmapper.factories.base_factory import BaseRecordFactory
from docmapper.models.interface import Interface
from docmapper.models.mapping_rule import MappingRule
from docmapper.models.processed_file import ProcessedFile
from docmapper.processors.path_evaluator import Node, PathEvaluator
from docmapper.services.error_trail import ErrorTrail
from docmapper.services.field_binder import FieldBinder
from docmapper.services.rule_resolver import LineGroup, ResolvedRules, RuleResolver
from docmapper.transformers.transform_chain import TransformChain
from docmapper.utils.date_utils import utc_now
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)

# Higher rank wins when groups of one document were found differently
DISCOVERY_RANK = {
    LineDiscovery.CONFIGURED: 0,
    LineDiscovery.PATTERN: 1,
    LineDiscovery.HEURISTIC: 2,
}


@dataclass
class ProcessingContext:
    """Mutable state of one processing attempt."""
    result: ProcessedFile
    trail: ErrorTrail
    namespaces: Dict[str, str]
    client_id: Optional[int] = None
    state: ProcessingState = ProcessingState.STARTED
    seen_nodes: Set[Any] = field(default_factory=set)
    next_line_number: int = 1
    failed_lines: int = 0
    discovery: Optional[LineDiscovery] = None

    def transition(self, state: ProcessingState) -> None:
        logger.debug(f"{self.result.file_name or self.result.id}: {self.state.value} -> {state.value}")
        self.state = state

    def record_discovery(self, discovery: Optional[LineDiscovery]) -> None:
        if discovery is None:
            return
        if self.discovery is None or DISCOVERY_RANK[discovery] > DISCOVERY_RANK[self.discovery]:
            self.discovery = discovery


class BaseDocumentStrategy(ABC):
    """
    Maps one document type onto its header and line records.

    An attempt moves STARTED -> HEADER_BOUND -> HEADER_PERSISTED -> LINES_BOUND
    -> LINES_PERSISTED, or to ERROR from any state. Header binding is
    fail-fast on required fields; each line is bound in isolation and a failed
    line is left out of the batch. Errors end up in the result's trail, never
    raised to the caller.
    """

    document_type: str
    header_table: str
    line_table: str
    factory_class: Type[BaseRecordFactory]

    def __init__(self,
                 repository: DocumentRepository,
                 evaluator: Optional[PathEvaluator] = None,
                 chain: Optional[TransformChain] = None,
                 settings: Optional[MappingSettings] = None):
        self.settings = settings or get_settings().mapping
        self.repository = repository
        self.evaluator = evaluator or PathEvaluator(self.settings)
        self.chain = chain or TransformChain(self.settings)
        self.resolver = RuleResolver(self.evaluator)
        self.binder = FieldBinder(self.chain)
        self.factory = self.factory_class(self.settings)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def process_document(self, document: Node, interface: Interface,
                         client_id: Optional[int] = None,
                         file_name: Optional[str] = None) -> ProcessedFile:
        """
        Map a parsed document onto header and line records and persist them

        Args:
            document: Parsed XML document
            interface: Interface descriptor the document arrived through
            client_id: Tenant the records belong to
            file_name: Name of the source file, for the processing record

        Returns:
            ProcessedFile in SUCCESS or ERROR state
        """
        result = ProcessedFile(
            file_name=file_name,
            document_type=self.document_type,
            interface_id=interface.id if interface else None,
            client_id=client_id,
            status=ProcessingStatus.PROCESSING.value,
        )

        context = ProcessingContext(
            result=result,
            trail=ErrorTrail(self.settings.error_trail_max_length),
            namespaces={},
            client_id=client_id,
        )

        logger.info(
            f"Processing {self.document_type} document {file_name or ''} for interface "
            f"{interface.name if interface else None}",
            extra={"extra_fields": {"document_type": self.document_type, "client_id": client_id}},
        )

        try:
            context.result = self.record_result(result)
            context.namespaces = self.evaluator.collect_namespaces(document)
            resolved = self.resolve_rules(interface)

            header = self.bind_header(document, resolved.header_rules, context)
            context.transition(ProcessingState.HEADER_BOUND)

            header = self.persist_header(header, context)
            context.transition(ProcessingState.HEADER_PERSISTED)

            lines = self.bind_lines(document, resolved.line_groups, header, context)
            if not lines and context.failed_lines:
                return self._fail(context, f"No lines could be mapped: {context.failed_lines} lines failed")
            context.transition(ProcessingState.LINES_BOUND)

            self.persist_lines(lines, context)
            context.transition(ProcessingState.LINES_PERSISTED)

        except AppException as e:
            return self._fail(context, e.message)
        except Exception as e:
            logger.exception(f"Unexpected error processing {self.document_type} document: {e}")
            return self._fail(context, f"Unexpected error: {e}")

        return self._succeed(context)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def resolve_rules(self, interface: Interface) -> ResolvedRules:
        interface_id = interface.id if interface else None
        try:
            header_rules = self.repository.resolve_mapping_rules(interface_id, self.header_table)
            line_rules = self.repository.resolve_mapping_rules(interface_id, self.line_table)
        except Exception as e:
            raise PersistenceBoundaryError("resolve_mapping_rules", e) from e

        resolved = self.resolver.partition(header_rules, line_rules)
        logger.debug(
            f"Resolved {len(resolved.header_rules)} header rules and "
            f"{resolved.line_rule_count} line rules in {len(resolved.line_groups)} groups"
        )
        return resolved

    def _evaluate_rule(self, node: Node, rule: MappingRule, path: Optional[str],
                       context: ProcessingContext) -> Optional[str]:
        if not path:
            return None
        try:
            return self.evaluator.evaluate(node, path, context.namespaces)
        except PathEvaluationError as e:
            raise FieldBindingError(rule.target_field, e.message, rule=rule, cause=e) from e

    def bind_header(self, document: Node, rules: List[MappingRule],
                    context: ProcessingContext) -> SQLModel:
        """
        Build the header and apply every header rule to it

        Raises:
            FieldBindingError: On the first required field that cannot be bound
            RecordValidationError: If the bound header fails document-type checks
        """
        header = self.factory.create_default_header(context.client_id)

        for rule in rules:
            try:
                raw_value = self._evaluate_rule(document, rule, rule.source_path, context)
                self.binder.bind(header, rule, raw_value)
            except FieldBindingError as e:
                if rule.required:
                    logger.error(f"Required header field failed, aborting document: {e.message}")
                    raise
                logger.warning(f"Header field skipped: {e.message}")
                context.trail.add(f"Header mapping error for {rule.source_path}: {e.message}")

        self.validate_header(header)
        return header

    def persist_header(self, header: SQLModel, context: ProcessingContext) -> SQLModel:
        try:
            persisted = self.repository.persist_header(header)
        except Exception as e:
            raise PersistenceBoundaryError("persist_header", e) from e

        if persisted is None or getattr(persisted, "id", None) is None:
            raise PersistenceBoundaryError("persist_header", message="Header was not assigned an identity")

        context.result.header_id = persisted.id
        logger.debug(f"Persisted {type(persisted).__name__} {persisted.id}")
        return persisted

    def bind_lines(self, document: Node, groups: List[LineGroup], header: SQLModel,
                   context: ProcessingContext) -> List[SQLModel]:
        """
        Build one line per matched node of every line group

        A node matched by more than one group is bound once, by the first group.
        """
        lines = []

        for group in groups:
            try:
                match = self.evaluator.find_line_nodes(document, group.parent_path, context.namespaces)
            except PathEvaluationError as e:
                logger.error(f"Line group {group.parent_path} skipped: {e.message}")
                context.trail.add(f"Line group {group.parent_path}: {e.message}")
                continue

            context.record_discovery(match.discovery)
            logger.debug(f"Line group {group.parent_path}: {len(match)} nodes ({match.discovery})")

            for index, node in enumerate(match.nodes, start=1):
                if node in context.seen_nodes:
                    logger.debug(f"Line {index} of {group.parent_path} already bound by another group")
                    continue
                context.seen_nodes.add(node)

                line = self.bind_line(node, index, group, header, context)
                if line is not None:
                    lines.append(line)

        return lines

    def bind_line(self, node: etree._Element, index: int, group: LineGroup, header: SQLModel,
                  context: ProcessingContext) -> Optional[SQLModel]:
        """
        Bind one line node. Any failure excludes the line and is recorded in the trail.

        Returns:
            The bound line, or None when it was excluded
        """
        line = self.factory.create_default_line(header, context.next_line_number, context.client_id)

        for rule in group.rules:
            relative = self.evaluator.relative_path(rule.source_path, group.parent_path)
            try:
                raw_value = self._evaluate_rule(node, rule, relative, context)
                self.binder.bind(line, rule, raw_value)
            except FieldBindingError as e:
                logger.warning(f"Line {index} excluded: {e.message}")
                context.trail.add(f"Line {index} mapping error for {rule.source_path}: {e.message}")
                context.failed_lines += 1
                return None

        try:
            self.validate_line(line)
        except RecordValidationError as e:
            logger.warning(f"Line {index} excluded: {e.message}")
            context.trail.add(f"Line {index} validation error: {e.message}")
            context.failed_lines += 1
            return None

        context.next_line_number += 1
        return line

    def persist_lines(self, lines: List[SQLModel], context: ProcessingContext) -> None:
        if not lines:
            logger.info(f"No lines to persist for {self.document_type} header {context.result.header_id}")
            return

        try:
            self.repository.persist_lines(lines)
        except Exception as e:
            raise PersistenceBoundaryError("persist_lines", e) from e

        context.result.line_count = len(lines)

    # ------------------------------------------------------------------
    # Document-type checks
    # ------------------------------------------------------------------

    def validate_header(self, header: SQLModel) -> None:
        """Override to reject a bound header"""
        pass

    def validate_line(self, line: SQLModel) -> None:
        if getattr(line, "header_id", None) is None:
            raise RecordValidationError("Line has no header", record_type=type(line).__name__)

    # ------------------------------------------------------------------
    # Result
    # ------------------------------------------------------------------

    def record_result(self, result: ProcessedFile) -> ProcessedFile:
        try:
            recorded = self.repository.record_processing_result(result)
        except Exception as e:
            raise PersistenceBoundaryError("record_processing_result", e) from e
        return recorded if recorded is not None else result

    def _finish(self, context: ProcessingContext, status: ProcessingStatus) -> ProcessedFile:
        result = context.result
        result.status = status.value
        result.error_message = context.trail.render()
        result.line_discovery = context.discovery.value if context.discovery else None
        result.processed_at = utc_now()

        try:
            return self.record_result(result)
        except PersistenceBoundaryError as e:
            logger.error(f"Could not record {status.value} result {result.id}: {e.message}", exc_info=True)
            context.trail.add(e.message)
            context.transition(ProcessingState.ERROR)
            result.status = ProcessingStatus.ERROR.value
            result.error_message = context.trail.render()
            return result

    def _fail(self, context: ProcessingContext, message: str) -> ProcessedFile:
        context.trail.add(message)
        context.transition(ProcessingState.ERROR)
        logger.error(
            f"{self.document_type} document failed: {message}",
            extra={"extra_fields": {"document_type": self.document_type, "client_id": context.client_id}},
        )
        return self._finish(context, ProcessingStatus.ERROR)

    def _succeed(self, context: ProcessingContext) -> ProcessedFile:
        logger.info(
            f"{self.document_type} document processed: {context.result.line_count} lines",
            extra={"extra_fields": {
                "document_type": self.document_type,
                "client_id": context.client_id,
                "header_id": context.result.header_id,
                "line_discovery": context.discovery.value if context.discovery else None,
            }},
        )
        return self._finish(context, ProcessingStatus.SUCCESS)
