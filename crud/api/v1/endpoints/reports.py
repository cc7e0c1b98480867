from fastapi import APIRouter, Depends, Query, Response
from datetime import date
from typing import Optional
from config import settings
from database import RecordStore, get_store
from crud import reports
from schemas.reports import DashboardSummary, Report, ReportType
from utils.pdf_generator import PDFGenerator

router = APIRouter()

@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(day: Optional[date] = None, store: RecordStore = Depends(get_store)):
    return reports.dashboard_summary(store, day)

@router.get("/{report_type}", response_model=Report)
def get_report(report_type: ReportType, day: Optional[date] = None, store: RecordStore = Depends(get_store)):
    """
    Build one of the DAILY, INVENTORY, INBOUND or OUTBOUND reports
    """
    return reports.build_report(store, report_type, day)

@router.get("/{report_type}/export")
def export_report(
    report_type: ReportType,
    format: str = Query("pdf", pattern="^(pdf|excel)$"),
    day: Optional[date] = None,
    store: RecordStore = Depends(get_store)
):
    report = reports.build_report(store, report_type, day)
    stamp = report.generated_at.strftime("%Y%m%d-%H%M")

    if format == "pdf":
        content = PDFGenerator(settings.FACILITY_NAME).create_pdf(report)
        media_type = "application/pdf"
        filename = f"{report_type.value.lower()}-report-{stamp}.pdf"
    else:
        content = reports.generate_excel_report(report)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        filename = f"{report_type.value.lower()}-report-{stamp}.xlsx"

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
