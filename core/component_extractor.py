"""
Component Extractor Module
Finds React components in one source file and summarizes their structure
(props, rendered element tree, complexity, location).
"""

import codecs
import html
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from tree_sitter import Node

from .component_models import (
    CLASS_COMPONENT,
    FRAGMENT_ELEMENT,
    FUNCTION_COMPONENT,
    ComponentRecord,
    PropRecord,
    ScalarValue,
    SourceSpan,
    StructureNode,
)
from .jsx_treesitter_parser import (
    first_error_line,
    grammar_for_path,
    is_function,
    is_jsx,
    named_children_of_type,
    node_text,
    parse_source,
    unwrap_parentheses,
    walk,
)

logger = logging.getLogger(__name__)

PARSE_ERROR = 'parse_error'
UNRESOLVED_STRUCTURE = 'unresolved_structure'
INTERNAL_ERROR = 'internal_error'

BASE_COMPONENT_TYPES = {'Component', 'PureComponent'}
FUNCTION_VALUE_TYPES = ('arrow_function', 'function_expression', 'function')
VARIABLE_DECLARATION_TYPES = ('lexical_declaration', 'variable_declaration')
BRANCH_NODE_TYPES = {
    'if_statement',
    'for_statement',
    'for_in_statement',
    'while_statement',
    'do_statement',
    'ternary_expression',
}
SHORT_CIRCUIT_OPERATORS = {'&&', '||', '??'}


@dataclass(frozen=True)
class ExtractionDiagnostic:
    file_path: str
    kind: str
    message: str
    line: Optional[int] = None

    def to_dict(self):
        return {'file': self.file_path, 'kind': self.kind, 'message': self.message, 'line': self.line}


@dataclass
class ExtractionResult:
    components: List[ComponentRecord] = field(default_factory=list)
    diagnostics: List[ExtractionDiagnostic] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """True when the file could not be analyzed at all."""
        return any(d.kind in (PARSE_ERROR, INTERNAL_ERROR) for d in self.diagnostics)


class ComponentExtractor:
    """Extracts component records from React source text.

    Extraction is pure: the caller supplies the source text, nothing is read from disk,
    and failures are reported as diagnostics instead of exceptions.
    """

    def extract(self, source_text: str, file_path: str) -> ExtractionResult:
        result = ExtractionResult()
        try:
            source_bytes = source_text.encode('utf-8')
            tree = parse_source(source_bytes, grammar_for_path(file_path))
        except Exception as e:
            logger.warning(f"Could not parse {file_path}: {e}")
            result.diagnostics.append(ExtractionDiagnostic(file_path, PARSE_ERROR, f"Parser failure: {e}"))
            return result

        root = tree.root_node
        if root.has_error:
            line = first_error_line(root)
            logger.warning(f"Syntax error in {file_path} near line {line}; skipping file")
            result.diagnostics.append(
                ExtractionDiagnostic(file_path, PARSE_ERROR, 'Source contains syntax errors', line)
            )
            return result

        try:
            for declaration in self._module_declarations(root):
                for record in self._records_for_declaration(declaration, source_bytes, file_path):
                    if record.structure_tree.is_unknown:
                        result.diagnostics.append(ExtractionDiagnostic(
                            file_path,
                            UNRESOLVED_STRUCTURE,
                            f"Could not resolve a JSX return for component '{record.name}'",
                            record.source_span.start_line,
                        ))
                    result.components.append(record)
        except Exception as e:
            logger.error(f"Error extracting components from {file_path}: {e}", exc_info=True)
            result.components = []
            result.diagnostics.append(ExtractionDiagnostic(file_path, INTERNAL_ERROR, str(e)))
            return result

        logger.debug(f"Extracted {len(result.components)} component(s) from {file_path}")
        return result

    def _module_declarations(self, root: Node) -> Iterator[Node]:
        for statement in root.named_children:
            if statement.type == 'export_statement':
                declaration = statement.child_by_field_name('declaration')
                if declaration is not None:
                    yield declaration
            else:
                yield statement

    def _records_for_declaration(self, declaration: Node, source: bytes, file_path: str) -> Iterator[ComponentRecord]:
        if declaration.type == 'function_declaration':
            name_node = declaration.child_by_field_name('name')
            if name_node is not None and self._renders_jsx(declaration):
                yield self._function_record(node_text(name_node, source), declaration, declaration, source, file_path)

        elif declaration.type in VARIABLE_DECLARATION_TYPES:
            for declarator in named_children_of_type(declaration, 'variable_declarator'):
                name_node = declarator.child_by_field_name('name')
                value = unwrap_parentheses(declarator.child_by_field_name('value'))
                if name_node is None or name_node.type != 'identifier':
                    continue
                if value is None or value.type not in FUNCTION_VALUE_TYPES:
                    continue
                if self._renders_jsx(value):
                    yield self._function_record(node_text(name_node, source), value, declarator, source, file_path)

        elif declaration.type == 'class_declaration':
            name_node = declaration.child_by_field_name('name')
            if name_node is not None and self._extends_base_component(declaration, source):
                yield self._class_record(node_text(name_node, source), declaration, source, file_path)

    def _renders_jsx(self, function_node: Node) -> bool:
        """Single pass over the body, stopping at the first JSX literal."""
        body = function_node.child_by_field_name('body')
        if body is None:
            return False
        return any(is_jsx(node) for node in walk(body))

    def _extends_base_component(self, class_node: Node, source: bytes) -> bool:
        superclass = self._superclass_name(class_node, source)
        if not superclass:
            return False
        return superclass.split('<')[0].strip().split('.')[-1] in BASE_COMPONENT_TYPES

    def _superclass_name(self, class_node: Node, source: bytes) -> Optional[str]:
        for child in class_node.children:
            if child.type != 'class_heritage':
                continue
            for part in child.named_children:
                if part.type == 'implements_clause':
                    continue
                if part.type == 'extends_clause':
                    value = part.child_by_field_name('value')
                    if value is None and part.named_children:
                        value = part.named_children[0]
                    return node_text(value, source) if value is not None else None
                return node_text(part, source)
        return None

    def _function_record(self, name: str, function_node: Node, span_node: Node,
                         source: bytes, file_path: str) -> ComponentRecord:
        root_jsx = self._find_root_jsx(function_node)
        structure = self._convert_element(root_jsx, source) if root_jsx is not None else StructureNode.unknown()
        return ComponentRecord(
            name=name,
            kind=FUNCTION_COMPONENT,
            props=self._extract_props(function_node, source),
            structure_tree=structure,
            complexity=self._complexity(function_node),
            source_span=self._span(span_node, file_path),
            source_text=node_text(span_node, source),
        )

    def _class_record(self, name: str, class_node: Node, source: bytes, file_path: str) -> ComponentRecord:
        root_jsx = None
        body = class_node.child_by_field_name('body')
        if body is not None:
            for member in named_children_of_type(body, 'method_definition'):
                method_name = member.child_by_field_name('name')
                if method_name is not None and node_text(method_name, source) == 'render':
                    root_jsx = self._find_root_jsx(member)
                    break
        structure = self._convert_element(root_jsx, source) if root_jsx is not None else StructureNode.unknown()
        # Props of class components are not inferred from this.props usage
        return ComponentRecord(
            name=name,
            kind=CLASS_COMPONENT,
            props=[],
            structure_tree=structure,
            complexity=self._complexity(class_node),
            source_span=self._span(class_node, file_path),
            source_text=node_text(class_node, source),
        )

    def _find_root_jsx(self, function_node: Node) -> Optional[Node]:
        """Return the first JSX-like return of a function, not all branches.

        Depth-first in source order; returns inside nested functions belong to those
        functions and are skipped. A concise arrow body counts as a return.
        """
        body = function_node.child_by_field_name('body')
        if body is None:
            return None
        if body.type != 'statement_block':
            expression = unwrap_parentheses(body)
            return expression if is_jsx(expression) else None

        stack = [body]
        while stack:
            node = stack.pop()
            if node.type == 'return_statement':
                values = [child for child in node.named_children if child.type != 'comment']
                value = unwrap_parentheses(values[0]) if values else None
                if is_jsx(value):
                    return value
                continue
            stack.extend(
                child for child in reversed(node.children)
                if not is_function(child) and child.type not in ('class_declaration', 'class')
            )
        return None

    def _convert_element(self, node: Node, source: bytes) -> StructureNode:
        if node.type == 'jsx_self_closing_element':
            opening = node
            children = []
        else:
            opening = node.child_by_field_name('open_tag')
            if opening is None:
                opening = named_children_of_type(node, 'jsx_opening_element')[0]
            children = [child for child in node.named_children if is_jsx(child)]

        name_node = opening.child_by_field_name('name')
        if name_node is None:
            element_type = FRAGMENT_ELEMENT
        else:
            element_type = ''.join(node_text(name_node, source).split())

        return StructureNode(
            element_type=element_type,
            attributes=self._extract_attributes(opening, source),
            children=[self._convert_element(child, source) for child in children],
        )

    def _extract_attributes(self, opening: Node, source: bytes) -> dict:
        attributes = {}
        for attribute in named_children_of_type(opening, 'jsx_attribute'):
            parts = [child for child in attribute.named_children if child.type != 'comment']
            if not parts:
                continue
            name = node_text(parts[0], source)
            attributes[name] = self._attribute_value(parts[1], source) if len(parts) > 1 else True
        return attributes

    def _attribute_value(self, value: Node, source: bytes) -> Any:
        if value.type == 'string':
            # JSX attribute strings carry HTML entities, not JS escapes
            return html.unescape(node_text(value, source)[1:-1])
        if value.type == 'jsx_expression':
            inner = [child for child in value.named_children if child.type not in ('comment', 'spread_element')]
            return 'expression' if inner else 'unknown'
        return 'unknown'

    def _extract_props(self, function_node: Node, source: bytes) -> List[PropRecord]:
        parameters = function_node.child_by_field_name('parameters')
        if parameters is None:
            first = function_node.child_by_field_name('parameter')
        else:
            candidates = [child for child in parameters.named_children if child.type != 'comment']
            first = candidates[0] if candidates else None
        if first is None:
            return []

        pattern = self._unwrap_parameter(first)
        if pattern is None:
            return []
        if pattern.type == 'object_pattern':
            return self._props_from_pattern(pattern, source)
        if pattern.type == 'identifier':
            # The fields of a props object cannot be enumerated without type information
            return [PropRecord(name=node_text(pattern, source), required=True)]
        return []

    def _unwrap_parameter(self, node: Optional[Node]) -> Optional[Node]:
        while node is not None:
            if node.type in ('required_parameter', 'optional_parameter'):
                node = node.child_by_field_name('pattern')
            elif node.type == 'assignment_pattern':
                node = node.child_by_field_name('left')
            else:
                return node
        return None

    def _props_from_pattern(self, pattern: Node, source: bytes) -> List[PropRecord]:
        props = []
        for entry in pattern.named_children:
            if entry.type == 'shorthand_property_identifier_pattern':
                props.append(PropRecord(name=node_text(entry, source), required=True))

            elif entry.type == 'object_assignment_pattern':
                left = entry.child_by_field_name('left')
                if left is not None and left.type == 'shorthand_property_identifier_pattern':
                    props.append(PropRecord(
                        name=node_text(left, source),
                        required=False,
                        default_value=self._literal_value(entry.child_by_field_name('right'), source),
                    ))

            elif entry.type == 'pair_pattern':
                key = entry.child_by_field_name('key')
                value = entry.child_by_field_name('value')
                if key is None or key.type != 'property_identifier':
                    continue
                has_default = value is not None and value.type == 'assignment_pattern'
                props.append(PropRecord(
                    name=node_text(key, source),
                    required=not has_default,
                    default_value=self._literal_value(value.child_by_field_name('right'), source) if has_default else None,
                ))
        return props

    def _literal_value(self, node: Optional[Node], source: bytes) -> Optional[ScalarValue]:
        """Capture string, number and boolean literal defaults; anything else stays absent."""
        node = unwrap_parentheses(node)
        if node is None:
            return None
        if node.type == 'string':
            return self._string_value(node, source)
        if node.type == 'number':
            return self._number_value(node_text(node, source))
        if node.type == 'true':
            return True
        if node.type == 'false':
            return False
        return None

    def _string_value(self, node: Node, source: bytes) -> str:
        if not node.named_children:
            return node_text(node, source)[1:-1]
        pieces = []
        for part in node.named_children:
            text = node_text(part, source)
            if part.type == 'escape_sequence':
                try:
                    text = codecs.decode(text, 'unicode_escape')
                except UnicodeDecodeError:
                    pass
            pieces.append(text)
        return ''.join(pieces)

    def _number_value(self, text: str) -> Optional[ScalarValue]:
        cleaned = text.replace('_', '')
        if cleaned.endswith('n'):
            return None
        try:
            return int(cleaned, 0)
        except ValueError:
            pass
        try:
            return float(cleaned)
        except ValueError:
            return None

    def _complexity(self, node: Node) -> int:
        """1 plus one per branching construct anywhere below the node."""
        complexity = 1
        for current in walk(node):
            if current.type in BRANCH_NODE_TYPES:
                complexity += 1
            elif current.type == 'binary_expression':
                operator = current.child_by_field_name('operator')
                if operator is not None and operator.type in SHORT_CIRCUIT_OPERATORS:
                    complexity += 1
        return complexity

    def _span(self, node: Node, file_path: str) -> SourceSpan:
        return SourceSpan(
            file_path=file_path,
            start_line=node.start_point[0] + 1,
            end_line=node.end_point[0] + 1,
            start_column=node.start_point[1],
            end_column=node.end_point[1],
        )


_default_extractor = ComponentExtractor()


def extract_components_with_diagnostics(source_text: str, file_path: str) -> ExtractionResult:
    return _default_extractor.extract(source_text, file_path)


def extract_components(source_text: str, file_path: str) -> List[ComponentRecord]:
    """Return the components defined in ``source_text``, in definition order.

    Unparsable source yields an empty list; use ``extract_components_with_diagnostics``
    to tell that apart from a file without components.
    """
    return _default_extractor.extract(source_text, file_path).components
