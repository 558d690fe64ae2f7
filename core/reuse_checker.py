"""
Reuse Checker Module
Coordinates component extraction and catalog matching for files and directories.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union
import logging

from comparator.structural_matcher import MatchConfig, StructuralMatcher
from utils.file_utils import collect_react_files, is_react_file, read_file_content
from .component_extractor import ComponentExtractor, ExtractionDiagnostic, PARSE_ERROR
from .component_models import CatalogComponent, ComponentRecord, MatchResult

logger = logging.getLogger(__name__)

STATUS_MATCHES = 'matches'
STATUS_NO_MATCHES = 'no_matches'
STATUS_NO_COMPONENTS = 'no_components'
STATUS_ERROR = 'error'


@dataclass
class CheckReport:
    """Outcome of checking one file against the catalog."""
    file_path: str
    components: List[ComponentRecord] = field(default_factory=list)
    matches: List[MatchResult] = field(default_factory=list)
    diagnostics: List[ExtractionDiagnostic] = field(default_factory=list)
    catalog_size: int = 0
    error: Optional[str] = None

    @property
    def status(self) -> str:
        if self.error is not None:
            return STATUS_ERROR
        if not self.components:
            return STATUS_NO_COMPONENTS
        if not self.matches:
            return STATUS_NO_MATCHES
        return STATUS_MATCHES

    def to_dict(self) -> Dict:
        return {
            'file': self.file_path,
            'status': self.status,
            'error': self.error,
            'catalog_size': self.catalog_size,
            'components': [component.to_dict() for component in self.components],
            'matches': [match.to_dict() for match in self.matches],
            'diagnostics': [diagnostic.to_dict() for diagnostic in self.diagnostics],
        }


class ReuseChecker:
    def __init__(self, catalog: Sequence[CatalogComponent], config: Optional[MatchConfig] = None):
        self.catalog = list(catalog)
        self.extractor = ComponentExtractor()
        self.matcher = StructuralMatcher(config or MatchConfig())

    def check_source(self, source_text: str, file_path: str) -> CheckReport:
        """Analyze source text that the caller already read."""
        report = CheckReport(file_path=file_path, catalog_size=len(self.catalog))
        extraction = self.extractor.extract(source_text, file_path)
        report.components = extraction.components
        report.diagnostics = extraction.diagnostics

        parse_errors = [d for d in extraction.diagnostics if d.kind == PARSE_ERROR]
        if parse_errors:
            report.error = parse_errors[0].message
            return report
        if extraction.failed:
            report.error = extraction.diagnostics[-1].message
            return report
        if not report.components:
            logger.info(f"No React components found in {file_path}")
            return report

        report.matches = self.matcher.match(report.components, self.catalog)
        logger.info(
            f"{file_path}: {len(report.components)} component(s), {len(report.matches)} match(es)"
        )
        return report

    def check_file(self, file_path: Union[str, Path]) -> CheckReport:
        path = Path(file_path)
        if not is_react_file(path):
            raise ValueError(f"{path} is not a React/JSX file")
        try:
            source_text = read_file_content(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return CheckReport(file_path=str(path), catalog_size=len(self.catalog), error=f"Could not read file: {e}")
        return self.check_source(source_text, str(path))

    def check_directory(self, directory: Union[str, Path]) -> List[CheckReport]:
        """Check every React file below a directory; one bad file never stops the batch."""
        reports = []
        for path in collect_react_files(directory):
            try:
                reports.append(self.check_file(path))
            except Exception as e:
                logger.error(f"Error checking {path}: {e}", exc_info=True)
                reports.append(CheckReport(file_path=str(path), catalog_size=len(self.catalog), error=str(e)))
        return reports
