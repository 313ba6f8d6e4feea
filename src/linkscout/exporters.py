"""Exporters writing research results to JSON, CSV and Excel files."""

import csv
import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from openpyxl import Workbook

from linkscout.constants import CSV_LIST_DELIMITER, EXCEL_MAX_SHEET_TITLE
from linkscout.exceptions import ExportError
from linkscout.models import CompetitorAnalysis, PageMetadata, SearchResult, SubmissionAnalysis, UrlCategorization
from linkscout.submission_analyzer import summarize_potential_sites

logger = logging.getLogger(__name__)


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles datetime objects and record types."""

    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if is_dataclass(obj):
            return asdict(obj)
        return super().default(obj)


def _as_record(item: Any) -> Dict[str, Any]:
    if isinstance(item, dict):
        return item
    if hasattr(item, "to_dict"):
        return item.to_dict()
    if is_dataclass(item) and not isinstance(item, type):
        return asdict(item)
    raise ExportError(f"Cannot export {type(item).__name__} as a record")


def flatten_value(value: Any) -> Any:
    """Flatten a value into something a single CSV or Excel cell can hold.

    Lists are joined with "||" (nested dicts and lists JSON-encoded first),
    dicts are JSON-encoded and None becomes an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return CSV_LIST_DELIMITER.join(
            json.dumps(v, cls=DateTimeEncoder) if isinstance(v, (dict, list, tuple)) else str(v)
            for v in value
        )
    if isinstance(value, dict):
        return json.dumps(value, cls=DateTimeEncoder)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def flatten_records(data: Sequence[Any]) -> tuple[List[str], List[Dict[str, Any]]]:
    """Validate and flatten records for tabular export.

    Returns:
        (header, rows) where header is the union of keys in first-seen order

    Raises:
        ExportError: If data is not a non-empty sequence of records
    """
    if not isinstance(data, (list, tuple)):
        raise ExportError("Data must be a list of records for tabular export")
    if len(data) == 0:
        raise ExportError("Cannot export empty data to CSV")

    rows = [
        {key: flatten_value(value) for key, value in _as_record(item).items()}
        for item in data
    ]

    header: Dict[str, None] = {}
    for row in rows:
        for key in row:
            header.setdefault(key, None)

    return list(header), rows


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%dT%H-%M-%S")


class DataExporter:
    """Writes research results under per-format output directories."""

    def __init__(
        self,
        json_dir: Union[str, Path] = "output/json",
        csv_dir: Union[str, Path] = "output/csv",
        excel_dir: Union[str, Path] = "output/excel",
    ):
        """Initialize the exporter.

        Args:
            json_dir: Directory for JSON files
            csv_dir: Directory for CSV files
            excel_dir: Directory for Excel workbooks
        """
        self.json_dir = Path(json_dir)
        self.csv_dir = Path(csv_dir)
        self.excel_dir = Path(excel_dir)

    @classmethod
    def from_config(cls, config) -> "DataExporter":
        return cls(config.json_dir, config.csv_dir, config.excel_dir)

    @staticmethod
    def _with_suffix(name: str, suffix: str) -> str:
        return name if name.endswith(suffix) else f"{name}{suffix}"

    def export_to_json(self, data: Any, name: str) -> Path:
        """Write data as indented JSON.

        Args:
            data: Records, record lists or plain JSON data
            name: File name, ".json" added if missing

        Returns:
            Path of the written file
        """
        self.json_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.json_dir / self._with_suffix(name, ".json")
        self._save_json(filepath, data)
        logger.info(f"Data exported to JSON: {filepath}")
        return filepath

    def export_to_csv(self, data: Sequence[Any], name: str) -> Path:
        """Write a list of records as CSV.

        Raises:
            ExportError: If data is empty or not a list of records
        """
        try:
            header, rows = flatten_records(data)
        except ExportError as e:
            logger.error(f"Error exporting to CSV: {e}")
            raise

        self.csv_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.csv_dir / self._with_suffix(name, ".csv")

        with open(filepath, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=header, restval="")
            writer.writeheader()
            writer.writerows(rows)

        logger.info(f"Data exported to CSV: {filepath}")
        return filepath

    def export_to_excel(self, sheets: Dict[str, Sequence[Any]], name: str) -> Path:
        """Write one worksheet per entry of sheets.

        Empty sheets are kept (with no rows) so workbooks have a stable shape.

        Raises:
            ExportError: If sheets is empty or a sheet holds non-record items
        """
        if not sheets:
            raise ExportError("Cannot export a workbook without sheets")

        workbook = Workbook()
        workbook.remove(workbook.active)

        for sheet_name, sheet_data in sheets.items():
            worksheet = workbook.create_sheet(title=sheet_name[:EXCEL_MAX_SHEET_TITLE])
            if not sheet_data:
                continue
            header, rows = flatten_records(list(sheet_data))
            worksheet.append(header)
            for row in rows:
                worksheet.append([row.get(column, "") for column in header])

        self.excel_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.excel_dir / self._with_suffix(name, ".xlsx")
        workbook.save(filepath)

        logger.info(f"Data exported to Excel: {filepath}")
        return filepath

    def export_backlink_analysis(
        self,
        analysis: CompetitorAnalysis,
        output_prefix: Optional[str] = None,
    ) -> Dict[str, Path]:
        """Export a competitor analysis.

        Writes the full analysis as JSON, a one-row-per-position summary CSV,
        and per-position CSVs of referring domains and backlinks.

        Returns:
            Paths of the full analysis and the summary
        """
        logger.info("===== EXPORTING BACKLINK ANALYSIS RESULTS =====")
        prefix = output_prefix or f"backlink_analysis_{_timestamp()}"

        full_analysis_path = self.export_to_json(analysis, f"{prefix}_full")

        summary = [
            {
                "keyword": analysis.keyword,
                "position": item.position,
                "url": item.url,
                "title": item.title,
                "backlinksCount": item.backlinks_count,
                "uniqueDomainsCount": item.unique_domains_count,
            }
            for item in analysis.backlinks_analysis
        ]
        paths = {"full_analysis": full_analysis_path}
        if summary:
            paths["summary"] = self.export_to_csv(summary, f"{prefix}_summary")

        for item in analysis.backlinks_analysis:
            position = f"{item.position:02d}"

            domains = [
                {
                    "targetUrl": item.url,
                    "targetPosition": item.position,
                    "referringDomain": domain,
                }
                for domain in item.unique_domains
            ]
            if domains:
                self.export_to_csv(domains, f"{prefix}_pos{position}_domains")

            if item.backlinks:
                self.export_to_csv(item.backlinks, f"{prefix}_pos{position}_backlinks")

        return paths

    def export_metadata(self, metadata: List[PageMetadata], name: str = "metadata") -> Dict[str, Path]:
        """Export scraped metadata to CSV and Excel."""
        return {
            "csv": self.export_to_csv(metadata, name),
            "excel": self.export_to_excel({"Metadata": metadata}, name),
        }

    def export_search_results(
        self,
        results: List[SearchResult],
        name: str = "search_results",
    ) -> Dict[str, Path]:
        """Export search results to CSV and Excel."""
        return {
            "csv": self.export_to_csv(results, name),
            "excel": self.export_to_excel({"Search Results": results}, name),
        }

    def export_categorized_sites(
        self,
        categorized: Dict[str, List[UrlCategorization]],
        name: str = "categorized_sites",
    ) -> Dict[str, Path]:
        """Export categorized sites; the workbook has one sheet per category."""
        all_sites = (
            categorized.get("social_media", [])
            + categorized.get("content_platform", [])
            + categorized.get("other", [])
        )

        paths = {
            "excel": self.export_to_excel(
                {
                    "Social Media": categorized.get("social_media", []),
                    "Content Platforms": categorized.get("content_platform", []),
                    "Other Sites": categorized.get("other", []),
                    "All Sites": all_sites,
                },
                name,
            )
        }
        if all_sites:
            paths["csv"] = self.export_to_csv(all_sites, name)
        else:
            logger.warning("No categorized sites to export to CSV")
        return paths

    def export_potential_sites(
        self,
        organized: Dict[str, List[SubmissionAnalysis]],
        name: str = "potential_sites",
    ) -> Dict[str, Path]:
        """Export submission analysis bands with a summary."""
        payload = {**organized, "summary": summarize_potential_sites(organized)}

        paths = {
            "json": self.export_to_json(payload, name),
            "excel": self.export_to_excel(
                {band: sites for band, sites in organized.items()},
                name,
            ),
        }

        all_sites = [site for sites in organized.values() for site in sites]
        if all_sites:
            paths["csv"] = self.export_to_csv(all_sites, name)
        return paths

    def _save_json(self, filepath: Path, data: Any) -> None:
        """Save data to JSON file.

        Args:
            filepath: Path to save to
            data: Data to save
        """
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, cls=DateTimeEncoder, ensure_ascii=False)
