"""JSON report schemas (camelCase on the wire)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from hulud_scanner.scanner.models import ScanReport


class _ReportModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ScanInfoSchema(_ReportModel):
    scan_path: str
    csv_path: str
    start_time: str | None
    end_time: str | None
    duration: int | None


class ScanSummarySchema(_ReportModel):
    total_packages_scanned: int
    total_unique_packages: int
    compromised_packages_found: int
    status: str


class VulnerabilitySchema(_ReportModel):
    package_name: str
    installed_version: str
    compromised_range: str
    location: str
    severity: str
    incident: str
    recommendation: str


class ScannedPackageSchema(_ReportModel):
    name: str
    version: str
    path: str


class ScanReportSchema(_ReportModel):
    scan: ScanInfoSchema
    summary: ScanSummarySchema
    vulnerabilities: list[VulnerabilitySchema]
    scanned_packages: list[ScannedPackageSchema]


def report_to_dict(report: ScanReport) -> dict:
    """Return the report as a plain dict with camelCase keys."""
    return ScanReportSchema.model_validate(report).model_dump(by_alias=True)


def report_to_json(report: ScanReport, indent: int = 2) -> str:
    return ScanReportSchema.model_validate(report).model_dump_json(
        by_alias=True, indent=indent
    )
