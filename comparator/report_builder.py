"""
Report Builder Module
Renders check reports as text, HTML or JSON using Jinja2 templates.
"""

import json
from pathlib import Path
from typing import Dict, List, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).parent / 'templates'


class ReportBuilder:
    def __init__(self, template_dir: Union[str, Path] = TEMPLATE_DIR):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(['html', 'html.j2']),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def collect_metrics(self, reports: List) -> Dict:
        """Summarize a batch of check reports."""
        confidence_counts = {'high': 0, 'medium': 0, 'low': 0}
        for report in reports:
            for match in report.matches:
                confidence_counts[match.confidence] += 1
        return {
            'files': len(reports),
            'components': sum(len(report.components) for report in reports),
            'matches': sum(len(report.matches) for report in reports),
            'errors': sum(1 for report in reports if report.status == 'error'),
            'confidence': confidence_counts,
        }

    def render_text(self, reports: List) -> str:
        template = self.env.get_template('report.txt.j2')
        return template.render(reports=reports, metrics=self.collect_metrics(reports))

    def render_html(self, reports: List) -> str:
        template = self.env.get_template('report.html.j2')
        return template.render(reports=reports, metrics=self.collect_metrics(reports))

    def render_json(self, reports: List) -> str:
        data = {
            'summary': self.collect_metrics(reports),
            'reports': [report.to_dict() for report in reports],
        }
        return json.dumps(data, indent=2)

    def write_report(self, reports: List, output_path: Union[str, Path], fmt: str = 'json') -> Path:
        renderers = {'text': self.render_text, 'html': self.render_html, 'json': self.render_json}
        if fmt not in renderers:
            raise ValueError(f"Unknown report format: {fmt}")
        output_path = Path(output_path)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(renderers[fmt](reports))
        return output_path
