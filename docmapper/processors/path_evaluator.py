# ==============================================
# docmapper/processors/path_evaluator.py
# ==============================================
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from lxml import etree

from docmapper.core.config import MappingSettings, get_settings
from docmapper.core.enums import LineDiscovery
from docmapper.core.exceptions import PathEvaluationError
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)

Node = Union[etree._ElementTree, etree._Element]

# A location step that names an element or attribute, optionally prefixed,
# optionally followed by predicates: tns:Item, @qty, Line[2], tns:Line[@type='A']
NAME_STEP_PATTERN = re.compile(
    r"^(?P<attr>@?)(?:(?P<prefix>[A-Za-z_][\w.\-]*):)?(?P<name>[A-Za-z_][\w.\-]*)(?P<rest>\[.*\])?$",
    re.DOTALL,
)


def split_steps(path: str) -> List[str]:
    """
    Split a path-query into its location steps.

    Slashes inside predicates and string literals are not separators. Empty
    tokens mark an absolute path ('/a' -> ['', 'a']) or a descendant axis
    ('a//b' -> ['a', '', 'b']), so '/'.join(split_steps(p)) == p.
    """
    steps = []
    current = []
    depth = 0
    quote = None

    for char in path:
        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char in ("[", "("):
            depth += 1
        elif char in ("]", ")"):
            depth -= 1
        elif char == "/" and depth == 0:
            steps.append("".join(current))
            current = []
            continue
        current.append(char)

    steps.append("".join(current))
    return steps


def normalize_path(path: Optional[str]) -> str:
    """Strip surrounding whitespace and trailing slashes."""
    if not path:
        return ""
    path = path.strip()
    if path in ("/", "//"):
        return path
    return path.rstrip("/")


def _rewrite_steps(path: str, rewrite: Callable[[str], str]) -> str:
    return "/".join(rewrite(step) if step else step for step in split_steps(path))


def _strip_prefix(step: str) -> str:
    if "::" in step:
        return step
    match = NAME_STEP_PATTERN.match(step.strip())
    if not match:
        return step
    return f"{match.group('attr')}{match.group('name')}{match.group('rest') or ''}"


def _to_local_name(step: str) -> str:
    if "::" in step:
        return step
    match = NAME_STEP_PATTERN.match(step.strip())
    if not match:
        return step
    test = f"*[local-name()='{match.group('name')}']"
    return f"{match.group('attr')}{test}{match.group('rest') or ''}"


def strip_prefixes(path: str) -> str:
    """'//tns:Items/tns:Item' -> '//Items/Item'"""
    return _rewrite_steps(path, _strip_prefix)


def to_local_name_path(path: str) -> str:
    """'//tns:Items/Item' -> "//*[local-name()='Items']/*[local-name()='Item']" """
    return _rewrite_steps(path, _to_local_name)


def document_root(node: Node) -> etree._Element:
    if isinstance(node, etree._ElementTree):
        return node.getroot()
    return node.getroottree().getroot()


def _is_element(item: Any) -> bool:
    # Comments and processing instructions are _Element subclasses without a str tag
    return isinstance(item, etree._Element) and isinstance(item.tag, str)


@dataclass
class LineNodeMatch:
    """Line nodes located for one line group and how they were found."""
    nodes: List[etree._Element] = field(default_factory=list)
    discovery: Optional[LineDiscovery] = None
    matched_path: Optional[str] = None

    @property
    def used_fallback(self) -> bool:
        return self.discovery in (LineDiscovery.PATTERN, LineDiscovery.HEURISTIC)

    def __len__(self) -> int:
        return len(self.nodes)


class PathEvaluator:
    """
    Evaluates path-queries against XML documents independently of the
    namespace prefixes a sender chose.

    Every query is attempted as written, then with prefixes removed, then with
    each name step rewritten to the local-name() idiom; the first attempt that
    matches wins.
    """

    def __init__(self, settings: Optional[MappingSettings] = None):
        self.settings = settings or get_settings().mapping

    def collect_namespaces(self, node: Node) -> Dict[str, str]:
        """
        Collect every namespace declared anywhere in the document

        Args:
            node: Document or any node inside it

        Returns:
            Mapping of prefix to namespace URI. The default namespace is
            registered under the configured default prefix.
        """
        namespaces: Dict[str, str] = {}
        default_uri = None

        for element in document_root(node).iter(etree.Element):
            for prefix, uri in element.nsmap.items():
                if prefix is None:
                    default_uri = default_uri or uri
                else:
                    namespaces.setdefault(prefix, uri)

        default_prefix = self.settings.default_namespace_prefix
        if default_uri and default_prefix not in namespaces:
            namespaces[default_prefix] = default_uri

        return namespaces

    def _candidates(self, path: str) -> List[str]:
        candidates = []
        for candidate in (path, strip_prefixes(path), to_local_name_path(path)):
            if candidate not in candidates:
                candidates.append(candidate)
        return candidates

    @staticmethod
    def _has_match(result: Any) -> bool:
        if isinstance(result, list):
            return len(result) > 0
        if isinstance(result, str):
            return result != ""
        return result is not None

    def _query(self, node: Node, path: str, namespaces: Optional[Dict[str, str]]) -> Any:
        if not path or not path.strip():
            raise PathEvaluationError(path or "", message="Path is empty")

        if namespaces is None:
            namespaces = self.collect_namespaces(node)

        errors = []
        evaluated = False

        for candidate in self._candidates(path.strip()):
            try:
                result = node.xpath(candidate, namespaces=namespaces)
            except etree.XPathError as e:
                errors.append(e)
                continue

            evaluated = True
            if self._has_match(result):
                if candidate != path:
                    logger.debug(f"Path '{path}' resolved as '{candidate}'")
                return result

        if not evaluated:
            raise PathEvaluationError(path, cause=errors[0])

        return []

    @staticmethod
    def _text_of(item: Any) -> str:
        if isinstance(item, etree._Element):
            return etree.tostring(item, method="text", encoding="unicode", with_tail=False)
        return str(item)

    def evaluate(self, node: Node, path: str,
                 namespaces: Optional[Dict[str, str]] = None) -> Optional[str]:
        """
        Evaluate a path and return the text value of the first match

        Args:
            node: Document or element to evaluate against
            path: Path-query, absolute or relative to node
            namespaces: Pre-collected namespace table for the document

        Returns:
            Text of the first match, or None when nothing matches

        Raises:
            PathEvaluationError: If no variant of the path can be evaluated
        """
        result = self._query(node, path, namespaces)

        if isinstance(result, list):
            return self._text_of(result[0]) if result else None
        if isinstance(result, bool):
            return "true" if result else "false"
        if isinstance(result, float):
            return str(int(result)) if result.is_integer() else str(result)
        return str(result) if result else None

    def evaluate_nodes(self, node: Node, path: str,
                       namespaces: Optional[Dict[str, str]] = None) -> List[etree._Element]:
        """
        Evaluate a path and return every matching element in document order

        Raises:
            PathEvaluationError: If no variant of the path can be evaluated
        """
        result = self._query(node, path, namespaces)

        if not isinstance(result, list):
            logger.debug(f"Path '{path}' produced a scalar, not a node-set")
            return []

        return [item for item in result if _is_element(item)]

    def parent_path(self, path: Optional[str]) -> str:
        """
        Path with its final step removed. Single-step paths have no parent
        and yield an empty string.
        """
        steps = split_steps(normalize_path(path))
        parent = steps[:-1]

        # '//a//b' leaves a dangling descendant marker behind 'a'
        while len(parent) > 1 and parent[-1] == "" and any(parent[:-1]):
            parent.pop()

        if not any(parent):
            return ""
        return "/".join(parent)

    def relative_path(self, path: Optional[str], ancestor_path: Optional[str]) -> str:
        """
        Rewrite path so it can be evaluated against a node selected by ancestor_path

        Args:
            path: Path written relative to the document
            ancestor_path: Path that selected the context node

        Returns:
            Relative path, or the last step of path when it is not under ancestor_path
        """
        path = normalize_path(path)
        ancestor = normalize_path(ancestor_path)

        if not ancestor:
            return path
        if path == ancestor:
            return "."

        if path.startswith(ancestor + "/"):
            remainder = path[len(ancestor):]
            if remainder.startswith("//"):
                return "." + remainder
            return remainder[1:]

        return split_steps(path)[-1]

    def find_line_nodes(self, document: Node, parent_path: str,
                        namespaces: Optional[Dict[str, str]] = None) -> LineNodeMatch:
        """
        Locate the nodes of one line group

        The configured path is tried first. When it matches nothing and fallback
        discovery is enabled, the conventional group patterns are tried in order
        and finally the repeating-element heuristic. Any fallback use is logged
        at WARNING level so an explicit rule can be configured later.

        Raises:
            PathEvaluationError: If the configured path cannot be evaluated
        """
        if namespaces is None:
            namespaces = self.collect_namespaces(document)

        if parent_path:
            nodes = self.evaluate_nodes(document, parent_path, namespaces)
            if nodes:
                return LineNodeMatch(nodes, LineDiscovery.CONFIGURED, parent_path)

        if not self.settings.fallback_line_discovery:
            return LineNodeMatch()

        for pattern in self.settings.line_group_patterns:
            try:
                nodes = self.evaluate_nodes(document, pattern, namespaces)
            except PathEvaluationError:
                continue
            if nodes:
                logger.warning(
                    f"No line nodes for '{parent_path}'; using fallback pattern '{pattern}'",
                    extra={"extra_fields": {"line_path": parent_path, "pattern": pattern, "count": len(nodes)}},
                )
                return LineNodeMatch(nodes, LineDiscovery.PATTERN, pattern)

        nodes = self.find_repeating_elements(document)
        if nodes:
            name = etree.QName(nodes[0]).localname
            logger.warning(
                f"No line nodes for '{parent_path}'; guessed repeating element '{name}'",
                extra={"extra_fields": {"line_path": parent_path, "element": name, "count": len(nodes)}},
            )
            return LineNodeMatch(nodes, LineDiscovery.HEURISTIC, name)

        return LineNodeMatch()

    def find_repeating_elements(self, document: Node) -> List[etree._Element]:
        """
        Best-effort repeating group: the first local name, in document order,
        that occurs more than once with every occurrence under the same parent.
        """
        groups: Dict[str, List[etree._Element]] = {}
        for element in document_root(document).iter(etree.Element):
            groups.setdefault(etree.QName(element).localname, []).append(element)

        for elements in groups.values():
            if len(elements) < 2:
                continue
            parent = elements[0].getparent()
            if parent is not None and all(e.getparent() is parent for e in elements[1:]):
                return elements

        return []
