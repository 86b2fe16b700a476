"""
app/services package marker.
"""

from app.services.booked_client_importer import dedup_key, import_booked_clients_csv
from app.services.crm_import_service import (
    CRMImportOutcome,
    CRMImportService,
    CRMPersistenceError,
    CRMPersistSummary,
    ReportType,
    UnknownReportTypeError,
    detect_report_type,
    get_crm_import_service,
)
from app.services.funnel_aggregator import aggregate_monthly, merge_funnel_buckets, roll_ytd
from app.services.leads_importer import import_leads_csv

__all__ = [
    "aggregate_monthly",
    "CRMImportOutcome",
    "CRMImportService",
    "CRMPersistenceError",
    "CRMPersistSummary",
    "dedup_key",
    "detect_report_type",
    "get_crm_import_service",
    "import_booked_clients_csv",
    "import_leads_csv",
    "merge_funnel_buckets",
    "ReportType",
    "roll_ytd",
    "UnknownReportTypeError",
]
