"""
Web Interface for Component Reuse Checks
"""

import json
import logging
import os
import sys
import tempfile
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask, jsonify, render_template, request, send_file
from catalog.catalog_loader import load_catalog_file, load_sample_catalog
from comparator.report_builder import ReportBuilder
from comparator.structural_matcher import MatchConfig
from core.reuse_checker import ReuseChecker
from utils.file_utils import is_react_file
from utils.settings import load_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
settings = load_settings()
catalog = load_catalog_file(settings.catalog_path) if settings.catalog_path else load_sample_catalog()
report_builder = ReportBuilder()

# Use system temp directory instead of local uploads
TEMP_DIR = Path(tempfile.gettempdir()) / 'component_reuse_checker'
TEMP_DIR.mkdir(exist_ok=True)
REPORT_PATH = TEMP_DIR / 'report.json'


def _read_request():
    """Return (source_text, file_path, threshold) from a JSON body, form fields or an upload."""
    if request.is_json:
        payload = request.get_json(silent=True) or {}
        return payload.get('source'), payload.get('file_path', 'Component.tsx'), payload.get('threshold')

    threshold = request.form.get('threshold') or None
    if 'source_file' in request.files and request.files['source_file'].filename:
        upload = request.files['source_file']
        return upload.read().decode('utf-8'), upload.filename, threshold
    return request.form.get('source'), request.form.get('file_path') or 'Component.tsx', threshold


def _build_checker(threshold):
    if threshold is None or threshold == '':
        config = settings.to_match_config()
    else:
        if isinstance(threshold, str):
            try:
                threshold = float(threshold)
            except ValueError:
                raise ValueError(f"threshold must be a number, got {threshold!r}") from None
        config = MatchConfig(threshold=threshold)
    return ReuseChecker(catalog, config)


def _run_check():
    source, file_path, threshold = _read_request()
    if not source:
        raise ValueError('Source code is required')
    if not is_react_file(file_path):
        raise ValueError(f"{file_path} is not a React/JSX file")
    checker = _build_checker(threshold)
    return checker.check_source(source, file_path)


@app.route('/')
def index():
    """Render the main page."""
    return render_template('index.html', catalog_size=len(catalog), threshold=settings.threshold)


@app.route('/analyze', methods=['POST'])
def analyze():
    """Check submitted source and return the report as JSON."""
    if not settings.enabled:
        return jsonify({'error': 'Component reuse check is disabled'}), 403
    try:
        report = _run_check()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error analyzing source: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500

    report_data = report.to_dict()
    with open(REPORT_PATH, 'w', encoding='utf-8') as f:
        json.dump(report_data, f, indent=2)
    report_data['success'] = report.status != 'error'
    report_data['report_url'] = '/download/report'
    return jsonify(report_data)


@app.route('/report', methods=['POST'])
def report_html():
    """Check submitted source and render the HTML report."""
    if not settings.enabled:
        return jsonify({'error': 'Component reuse check is disabled'}), 403
    try:
        report = _run_check()
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return report_builder.render_html([report])


@app.route('/catalog')
def catalog_listing():
    return jsonify({
        'count': len(catalog),
        'components': [component.to_dict() for component in catalog],
    })


@app.route('/download/report')
def download_report():
    """Download the last analysis report."""
    if REPORT_PATH.exists():
        return send_file(
            REPORT_PATH,
            mimetype='application/json',
            as_attachment=True,
            download_name='component_reuse_report.json'
        )
    return jsonify({'error': 'No report available'}), 404


if __name__ == '__main__':
    port = int(os.environ.get("PORT", 5000))
    app.run(host='0.0.0.0', port=port)
