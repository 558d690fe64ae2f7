import sys
import os
import json
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from catalog.catalog_loader import load_catalog_file, load_sample_catalog, parse_catalog
from core.component_models import CatalogComponent, StructureSignature


def test_sample_catalog_loads_all_components():
    catalog = load_sample_catalog()
    names = [component.name for component in catalog]
    assert len(catalog) == 15
    assert names[:3] == ['Button', 'PrimaryButton', 'SecondaryButton']
    assert names[-1] == 'Checkbox'
    assert all(component.source == 'square-design-system' for component in catalog)


def test_sample_catalog_signature_and_usage():
    button = load_sample_catalog()[0]
    assert button.structure_signature.element_types == ['button']
    assert button.structure_signature.prop_patterns == ['onClick', 'label', 'disabled', 'variant', 'size']
    assert button.structure_signature.children_pattern == 'text'
    assert button.usage.imports == ['import { Button } from "@square/design-system"']
    assert [prop.name for prop in button.usage.props] == ['variant', 'size', 'onClick', 'disabled']
    assert button.documentation_url == 'https://squareup.com'


def test_catalog_ids_are_unique():
    catalog = load_sample_catalog()
    assert len({component.id for component in catalog}) == len(catalog)


def test_load_catalog_file(tmp_path):
    path = tmp_path / 'catalog.json'
    path.write_text(json.dumps({
        'source': 'figma:abc123',
        'components': [
            {'name': 'Tag', 'structure': {'element_types': ['span'], 'prop_patterns': ['text']}},
            {'name': 'Tile', 'source': 'override', 'structure': {}},
        ],
    }), encoding='utf-8')
    catalog = load_catalog_file(path)
    assert [component.name for component in catalog] == ['Tag', 'Tile']
    assert catalog[0].source == 'figma:abc123'
    assert catalog[1].source == 'override'
    assert catalog[1].structure_signature.element_types == []
    assert catalog[1].structure_signature.children_pattern == 'unknown'


def test_entry_without_structure_is_rejected():
    with pytest.raises(ValueError, match='#1'):
        parse_catalog({'components': [
            {'name': 'Ok', 'structure': {}},
            {'name': 'Broken'},
        ]})


def test_entry_with_non_list_element_types_is_rejected():
    with pytest.raises(ValueError):
        parse_catalog({'components': [{'name': 'Bad', 'structure': {'element_types': 'div'}}]})


def test_entry_without_name_is_rejected():
    with pytest.raises(ValueError):
        parse_catalog({'components': [{'structure': {}}]})


def test_catalog_component_requires_source():
    with pytest.raises(ValueError):
        CatalogComponent(name='Button', source='', structure_signature=StructureSignature())
