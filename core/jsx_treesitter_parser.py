"""
JSX Tree-sitter Parser Module
Parses JavaScript/TypeScript/JSX source with tree-sitter and offers small node helpers.
"""

from pathlib import Path
from typing import Iterator, List, Optional

from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_parser

# Grammar per file extension; anything unknown is parsed as TSX, which accepts JSX and type syntax
EXTENSION_GRAMMARS = {
    '.js': 'javascript',
    '.jsx': 'javascript',
    '.mjs': 'javascript',
    '.cjs': 'javascript',
    '.ts': 'typescript',
    '.tsx': 'tsx',
}
DEFAULT_GRAMMAR = 'tsx'

JSX_ELEMENT_TYPES = ('jsx_element', 'jsx_self_closing_element')
FUNCTION_TYPES = (
    'function_declaration',
    'function_expression',
    'function',
    'arrow_function',
    'generator_function_declaration',
    'generator_function',
    'method_definition',
)

_parsers = {}


def grammar_for_path(file_path: str) -> str:
    """Pick the tree-sitter grammar used for a source file."""
    return EXTENSION_GRAMMARS.get(Path(file_path).suffix.lower(), DEFAULT_GRAMMAR)


def _get_parser(grammar: str) -> Parser:
    if grammar not in _parsers:
        _parsers[grammar] = get_parser(grammar)
    return _parsers[grammar]


def parse_source(source_bytes: bytes, grammar: str = DEFAULT_GRAMMAR) -> Tree:
    """Parse source bytes with the given grammar."""
    return _get_parser(grammar).parse(source_bytes)


def node_text(node: Node, source_bytes: bytes) -> str:
    return source_bytes[node.start_byte:node.end_byte].decode('utf-8', errors='replace')


def first_error_line(node: Node) -> Optional[int]:
    """Return the 1-based line of the first ERROR or missing node below ``node``."""
    for current in walk(node):
        if current.type == 'ERROR' or current.is_missing:
            return current.start_point[0] + 1
    return None


def walk(node: Node) -> Iterator[Node]:
    """Pre-order depth-first walk over every node, including ``node`` itself."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def unwrap_parentheses(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == 'parenthesized_expression':
        inner = [child for child in node.named_children if child.type != 'comment']
        node = inner[0] if inner else None
    return node


def is_jsx(node: Optional[Node]) -> bool:
    return node is not None and node.type in JSX_ELEMENT_TYPES


def is_function(node: Optional[Node]) -> bool:
    return node is not None and node.type in FUNCTION_TYPES


def named_children_of_type(node: Node, *types: str) -> List[Node]:
    return [child for child in node.named_children if child.type in types]
