import sys
import os
import json
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from catalog.catalog_loader import load_sample_catalog
from comparator.report_builder import ReportBuilder
from comparator.structural_matcher import MatchConfig
from core.reuse_checker import ReuseChecker
from utils.file_utils import collect_react_files, is_react_file
from utils.settings import CheckerSettings, load_settings

BUTTON_SOURCE = '''
export function CustomButton({ label, onClick, variant = 'primary', disabled = false }) {
    return (
        <button className={`btn btn-${variant}`} onClick={onClick} disabled={disabled} type="button">
            {label}
        </button>
    );
}
'''


def make_checker(threshold=70):
    return ReuseChecker(load_sample_catalog(), MatchConfig(threshold=threshold))


def test_check_source_reports_matches():
    report = make_checker().check_source(BUTTON_SOURCE, 'CustomButton.jsx')
    assert report.status == 'matches'
    assert report.catalog_size == 15
    assert [c.name for c in report.components] == ['CustomButton']
    top = report.matches[0]
    assert top.catalog_component.name == 'Button'
    assert top.scores.combined >= 70
    names = [m.catalog_component.name for m in report.matches]
    assert 'Card' not in names


def test_check_source_without_components():
    report = make_checker().check_source('export const answer = 42;\n', 'answer.js')
    assert report.status == 'no_components'
    assert report.error is None


def test_check_source_without_matches():
    report = ReuseChecker([], MatchConfig()).check_source(BUTTON_SOURCE, 'CustomButton.jsx')
    assert report.status == 'no_matches'
    assert report.matches == []


def test_check_source_with_syntax_error_is_an_error():
    report = make_checker().check_source('function Broken( { return <div> }', 'Broken.jsx')
    assert report.status == 'error'
    assert report.components == []
    assert report.diagnostics


def test_check_file_rejects_non_react_files(tmp_path):
    path = tmp_path / 'styles.css'
    path.write_text('body {}', encoding='utf-8')
    with pytest.raises(ValueError):
        make_checker().check_file(path)


def test_check_directory_skips_vendor_code_and_continues_after_errors(tmp_path):
    (tmp_path / 'components').mkdir()
    (tmp_path / 'components' / 'Button.jsx').write_text(BUTTON_SOURCE, encoding='utf-8')
    (tmp_path / 'components' / 'Broken.tsx').write_text('const = ;', encoding='utf-8')
    (tmp_path / 'node_modules').mkdir()
    (tmp_path / 'node_modules' / 'lib.js').write_text(BUTTON_SOURCE, encoding='utf-8')
    (tmp_path / 'types.d.ts').write_text('export type A = string;', encoding='utf-8')

    reports = make_checker().check_directory(tmp_path)
    by_name = {os.path.basename(r.file_path): r for r in reports}
    assert sorted(by_name) == ['Broken.tsx', 'Button.jsx']
    assert by_name['Button.jsx'].status == 'matches'
    assert by_name['Broken.tsx'].status == 'error'


def test_react_file_detection(tmp_path):
    assert is_react_file('App.tsx')
    assert is_react_file('App.JSX')
    assert not is_react_file('index.d.ts')
    assert not is_react_file('README.md')
    (tmp_path / '.hidden').mkdir()
    (tmp_path / '.hidden' / 'A.jsx').write_text('', encoding='utf-8')
    (tmp_path / 'B.js').write_text('', encoding='utf-8')
    assert [p.name for p in collect_react_files(tmp_path)] == ['B.js']


def test_report_builder_text_and_json():
    reports = [
        make_checker().check_source(BUTTON_SOURCE, 'CustomButton.jsx'),
        make_checker().check_source('export const answer = 42;\n', 'answer.js'),
    ]
    builder = ReportBuilder()
    text = builder.render_text(reports)
    assert 'Match #1' in text
    assert 'Your component: CustomButton' in text
    assert 'No React components found' in text

    data = json.loads(builder.render_json(reports))
    assert data['summary']['files'] == 2
    assert data['summary']['components'] == 1
    assert data['reports'][0]['status'] == 'matches'
    assert data['reports'][1]['status'] == 'no_components'


def test_report_builder_html_escapes_and_writes(tmp_path):
    report = make_checker().check_source(BUTTON_SOURCE, 'CustomButton.jsx')
    builder = ReportBuilder()
    html = builder.render_html([report])
    assert html.startswith('<!DOCTYPE html>')
    assert '&#34;CustomButton&#34;' in html or '&quot;CustomButton&quot;' in html
    output = builder.write_report([report], tmp_path / 'report.html', 'html')
    assert output.read_text(encoding='utf-8') == html
    with pytest.raises(ValueError):
        builder.write_report([report], tmp_path / 'report.xml', 'xml')


def test_settings_from_environment():
    settings = load_settings(environ={
        'REUSE_CHECK_THRESHOLD': '55',
        'REUSE_CHECK_ENABLED': 'false',
        'REUSE_CHECK_CATALOG': '/tmp/catalog.json',
    })
    assert settings == CheckerSettings(enabled=False, threshold=55.0, catalog_path='/tmp/catalog.json')
    assert settings.to_match_config().threshold == 55.0


def test_settings_file_with_environment_override(tmp_path):
    path = tmp_path / 'settings.json'
    path.write_text(json.dumps({'threshold': 80, 'enabled': True}), encoding='utf-8')
    assert load_settings(path, environ={}).threshold == 80
    assert load_settings(path, environ={'REUSE_CHECK_THRESHOLD': '65'}).threshold == 65.0


def test_settings_defaults():
    assert load_settings(environ={}) == CheckerSettings()


@pytest.mark.parametrize('environ', [
    {'REUSE_CHECK_THRESHOLD': 'high'},
    {'REUSE_CHECK_THRESHOLD': '150'},
    {'REUSE_CHECK_THRESHOLD': 'nan'},
    {'REUSE_CHECK_ENABLED': 'maybe'},
])
def test_invalid_settings_are_rejected(environ):
    with pytest.raises(ValueError):
        load_settings(environ=environ)
