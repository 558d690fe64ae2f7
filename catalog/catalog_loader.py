"""
Catalog Loader Module
Loads design-system catalogs from JSON files into catalog component records.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from core.component_models import CatalogComponent, CatalogUsage, PropRecord, StructureSignature

logger = logging.getLogger(__name__)

SAMPLE_CATALOG_PATH = Path(__file__).parent / 'data' / 'sample_catalog.json'


def _parse_usage(raw: Dict[str, Any]) -> CatalogUsage:
    props = [
        PropRecord(
            name=prop['name'],
            required=bool(prop.get('required', False)),
            default_value=prop.get('default_value'),
        )
        for prop in raw.get('props', [])
    ]
    return CatalogUsage(imports=list(raw.get('imports', [])), props=props, example=raw.get('example', ''))


def parse_catalog_entry(raw: Dict[str, Any], default_source: str) -> CatalogComponent:
    """Build one catalog record; malformed entries raise ValueError."""
    if not isinstance(raw, dict):
        raise ValueError(f"Catalog entry must be an object, got {type(raw).__name__}")
    structure = raw.get('structure')
    if not isinstance(structure, dict):
        raise ValueError(f"Catalog entry '{raw.get('name')}' has no structure signature")
    try:
        usage = _parse_usage(raw['usage']) if raw.get('usage') else None
    except (KeyError, TypeError) as e:
        raise ValueError(f"Catalog entry '{raw.get('name')}' has malformed usage: {e}") from e

    return CatalogComponent(
        name=raw.get('name'),
        source=raw.get('source', default_source),
        structure_signature=StructureSignature(
            element_types=structure.get('element_types', []),
            prop_patterns=structure.get('prop_patterns', []),
            children_pattern=structure.get('children_pattern', 'unknown'),
        ),
        description=raw.get('description'),
        category=raw.get('category'),
        tags=list(raw.get('tags', [])),
        usage=usage,
        documentation_url=raw.get('documentation_url'),
        code_example=raw.get('code_example'),
    )


def parse_catalog(data: Dict[str, Any]) -> List[CatalogComponent]:
    source = data.get('source', 'custom')
    components = []
    for index, raw in enumerate(data.get('components', [])):
        try:
            components.append(parse_catalog_entry(raw, source))
        except ValueError as e:
            raise ValueError(f"Invalid catalog entry #{index}: {e}") from e
    return components


def load_catalog_file(path: Union[str, Path]) -> List[CatalogComponent]:
    """Load a catalog JSON file of the form ``{"source": ..., "components": [...]}``."""
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Catalog file {path} must contain a JSON object")
    components = parse_catalog(data)
    logger.info(f"Loaded {len(components)} catalog component(s) from {path}")
    return components


def load_sample_catalog() -> List[CatalogComponent]:
    """The built-in demo design system used when no catalog is configured."""
    return load_catalog_file(SAMPLE_CATALOG_PATH)
