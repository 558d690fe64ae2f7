"""
Component Models Module
Records shared by the component extractor, the structural matcher and the report layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import math
import uuid

FUNCTION_COMPONENT = 'FunctionComponent'
CLASS_COMPONENT = 'ClassComponent'
COMPONENT_KINDS = (FUNCTION_COMPONENT, CLASS_COMPONENT)

# Placeholder element type for components whose rendered output could not be resolved
UNKNOWN_ELEMENT = 'unknown'
FRAGMENT_ELEMENT = 'Fragment'

DIFFERENCE_CATEGORIES = ('prop', 'structure', 'behavior')
SEVERITIES = ('minor', 'moderate', 'major')
CONFIDENCE_TIERS = ('high', 'medium', 'low')

ScalarValue = Union[str, int, float, bool]


def generate_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class PropRecord:
    name: str
    required: bool = True
    default_value: Optional[ScalarValue] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'required': self.required, 'default_value': self.default_value}


@dataclass(frozen=True)
class StructureNode:
    """One element of a component's rendered output.

    Only element-typed children are kept; text and expression children are pruned.
    """
    element_type: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    children: List['StructureNode'] = field(default_factory=list)

    @classmethod
    def unknown(cls) -> 'StructureNode':
        return cls(element_type=UNKNOWN_ELEMENT)

    @property
    def is_unknown(self) -> bool:
        return self.element_type == UNKNOWN_ELEMENT

    def element_types(self) -> List[str]:
        """Flatten the tree into distinct tag names, in depth-first order of first appearance."""
        types: List[str] = []
        stack = [self]
        while stack:
            node = stack.pop()
            if node.element_type not in (UNKNOWN_ELEMENT, FRAGMENT_ELEMENT) and node.element_type not in types:
                types.append(node.element_type)
            stack.extend(reversed(node.children))
        return types

    def to_dict(self) -> Dict[str, Any]:
        return {
            'element_type': self.element_type,
            'attributes': dict(self.attributes),
            'children': [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class SourceSpan:
    file_path: str
    start_line: int = 0
    end_line: int = 0
    start_column: int = 0
    end_column: int = 0

    @property
    def is_resolved(self) -> bool:
        return self.start_line > 0 and self.end_line >= self.start_line

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file': self.file_path,
            'start_line': self.start_line,
            'end_line': self.end_line,
            'start_column': self.start_column,
            'end_column': self.end_column,
        }


@dataclass(frozen=True)
class ComponentRecord:
    """Structural description of one UI component found in user source."""
    name: str
    kind: str
    props: List[PropRecord]
    structure_tree: StructureNode
    complexity: int
    source_span: SourceSpan
    source_text: str = ''
    id: str = field(default_factory=generate_id)

    @property
    def lines_of_code(self) -> int:
        if not self.source_span.is_resolved:
            return 0
        return self.source_span.end_line - self.source_span.start_line + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'type': self.kind,
            'props': [prop.to_dict() for prop in self.props],
            'structure': self.structure_tree.to_dict(),
            'complexity': self.complexity,
            'lines_of_code': self.lines_of_code,
            'location': self.source_span.to_dict(),
        }


@dataclass(frozen=True)
class StructureSignature:
    """Coarse structural fingerprint of a catalog component (no full tree available)."""
    element_types: List[str] = field(default_factory=list)
    prop_patterns: List[str] = field(default_factory=list)
    children_pattern: str = 'unknown'

    def __post_init__(self):
        for label, values in (('element_types', self.element_types), ('prop_patterns', self.prop_patterns)):
            if not isinstance(values, (list, tuple)):
                raise ValueError(f"{label} must be a list of strings, got {type(values).__name__}")
            if not all(isinstance(value, str) for value in values):
                raise ValueError(f"{label} must only contain strings")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'element_types': list(self.element_types),
            'prop_patterns': list(self.prop_patterns),
            'children_pattern': self.children_pattern,
        }


@dataclass(frozen=True)
class CatalogUsage:
    imports: List[str] = field(default_factory=list)
    props: List[PropRecord] = field(default_factory=list)
    example: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'imports': list(self.imports),
            'props': [prop.to_dict() for prop in self.props],
            'example': self.example,
        }


@dataclass(frozen=True)
class CatalogComponent:
    """Reference component from a design-system catalog.

    The source label records provenance (a design tool file, a static sample set);
    matching never branches on it.
    """
    name: str
    source: str
    structure_signature: StructureSignature
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    usage: Optional[CatalogUsage] = None
    documentation_url: Optional[str] = None
    code_example: Optional[str] = None
    id: str = field(default_factory=generate_id)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Catalog component name must be a non-empty string")
        if not isinstance(self.source, str) or not self.source.strip():
            raise ValueError(f"Catalog component '{self.name}' has no source label")
        if not isinstance(self.structure_signature, StructureSignature):
            raise ValueError(f"Catalog component '{self.name}' has no structure signature")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'source': self.source,
            'description': self.description,
            'category': self.category,
            'tags': list(self.tags),
            'structure': self.structure_signature.to_dict(),
            'usage': self.usage.to_dict() if self.usage else None,
            'documentation_url': self.documentation_url,
            'code_example': self.code_example,
        }


@dataclass(frozen=True)
class MatchScores:
    structural: int
    semantic: int
    combined: int

    def __post_init__(self):
        for label in ('structural', 'semantic', 'combined'):
            value = getattr(self, label)
            if not 0 <= value <= 100:
                raise ValueError(f"{label} score out of range: {value}")


@dataclass(frozen=True)
class Difference:
    category: str
    description: str
    severity: str

    def __post_init__(self):
        if self.category not in DIFFERENCE_CATEGORIES:
            raise ValueError(f"Unknown difference category: {self.category}")
        if self.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity: {self.severity}")

    def to_dict(self) -> Dict[str, str]:
        return {'type': self.category, 'description': self.description, 'severity': self.severity}


@dataclass(frozen=True)
class MatchResult:
    """A user component paired with a catalog component it likely duplicates."""
    user_component: ComponentRecord
    catalog_component: CatalogComponent
    scores: MatchScores
    match_reasons: List[str]
    differences: List[Difference]
    confidence: str
    id: str = field(default_factory=generate_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_component': self.user_component.to_dict(),
            'catalog_component': self.catalog_component.to_dict(),
            'scores': {
                'structural': self.scores.structural,
                'semantic': self.scores.semantic,
                'combined': self.scores.combined,
            },
            'match_reasons': list(self.match_reasons),
            'differences': [difference.to_dict() for difference in self.differences],
            'confidence': self.confidence,
        }


def round_score(value: float) -> int:
    """Round half up to the nearest integer, clamped to the 0-100 scale."""
    if not math.isfinite(value):
        raise ValueError(f"Score is not finite: {value}")
    return max(0, min(100, int(math.floor(value + 0.5))))
