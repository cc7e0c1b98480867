from datetime import date, datetime, timezone
from io import BytesIO
from typing import List, Optional
import pandas as pd
import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter
from config import settings
from database import RecordStore
from logging_config import get_logger
from models.transactions import TransactionDirection
from schemas.inventory import Item
from schemas.reports import DashboardSummary, Report, ReportRow, ReportType

logger = get_logger(__name__)

TRANSACTION_COLUMNS = ["item_name", "direction", "quantity", "timestamp", "username"]


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _transactions_frame(transactions) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "item_id": t.item_id,
                "item_name": t.item_name,
                "direction": t.direction.value,
                "quantity": t.quantity,
                "timestamp": t.timestamp,
                "username": t.username,
            }
            for t in transactions
        ],
        columns=["item_id"] + TRANSACTION_COLUMNS,
    )
    # naive timestamps come back from SQLite and are stored as UTC
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df


def _direction_totals(df: pd.DataFrame) -> dict:
    totals = {d.value: 0 for d in TransactionDirection}
    if not df.empty:
        for direction, quantity in df.groupby("direction")["quantity"].sum().items():
            totals[direction] = int(quantity)
    return totals


def dashboard_summary(store: RecordStore, today: Optional[date] = None) -> DashboardSummary:
    today = today or _today()
    items = store.get_all("items")
    df = _transactions_frame(store.get_all("transactions"))
    todays = df[df["timestamp"].dt.date == today]
    counts = todays["direction"].value_counts()

    threshold = settings.LOW_STOCK_THRESHOLD
    low_stock = sorted(
        (i for i in items if i.current_quantity < threshold),
        key=lambda i: i.current_quantity,
    )

    return DashboardSummary(
        day=today,
        total_items=len(items),
        inbound_today=int(counts.get(TransactionDirection.INBOUND.value, 0)),
        outbound_today=int(counts.get(TransactionDirection.OUTBOUND.value, 0)),
        low_stock_count=len(low_stock),
        low_stock_threshold=threshold,
        low_stock_items=[Item.model_validate(i) for i in low_stock],
    )


def _report_title(report_type: ReportType, today: date) -> str:
    if report_type == ReportType.DAILY:
        return f"Daily Activity Report - {today.strftime('%d/%m/%Y')}"
    if report_type == ReportType.INVENTORY:
        return "Current Stock Inventory Report"
    if report_type == ReportType.INBOUND:
        return "Total Inbound Report"
    return "Outbound Consumption Report"


def _inventory_rows(items) -> List[ReportRow]:
    items = sorted(items, key=lambda i: (i.category.lower(), i.name.lower()))
    return [
        ReportRow(
            code=i.code,
            name=i.name,
            category=i.category,
            unit=i.unit,
            quantity=i.current_quantity,
        )
        for i in items
    ]


def _movement_rows(df: pd.DataFrame) -> List[ReportRow]:
    df = df.sort_values("timestamp", ascending=False)
    return [
        ReportRow(
            name=row.item_name,
            direction=row.direction,
            quantity=int(row.quantity),
            timestamp=row.timestamp.to_pydatetime(),
            username=row.username,
        )
        for row in df.itertuples(index=False)
    ]


def build_report(store: RecordStore, report_type: ReportType, today: Optional[date] = None) -> Report:
    report_type = ReportType(report_type)
    today = today or _today()

    if report_type == ReportType.INVENTORY:
        rows = _inventory_rows(store.get_all("items"))
        totals = {}
    else:
        df = _transactions_frame(store.get_all("transactions"))
        if report_type == ReportType.DAILY:
            df = df[df["timestamp"].dt.date == today]
        else:
            df = df[df["direction"] == report_type.value]
        rows = _movement_rows(df)
        totals = _direction_totals(df)

    logger.info("Built %s report with %d rows", report_type.value, len(rows))
    return Report(
        report_type=report_type,
        title=_report_title(report_type, today),
        generated_at=datetime.now(timezone.utc),
        rows=rows,
        total_quantity=sum(r.quantity for r in rows),
        totals_by_direction=totals,
    )


def report_table(report: Report) -> List[List]:
    """Header plus one list per row, shared by the PDF and Excel renderers."""
    if report.report_type == ReportType.INVENTORY:
        table = [["Code", "Name", "Category", "Unit", "Quantity"]]
        for r in report.rows:
            table.append([r.code, r.name, r.category, r.unit, r.quantity])
    else:
        table = [["Date", "Item", "Direction", "Quantity", "User"]]
        for r in report.rows:
            table.append([
                r.timestamp.strftime("%d/%m/%Y %H:%M") if r.timestamp else "",
                r.name,
                r.direction,
                r.quantity,
                r.username or "",
            ])
    return table


def generate_excel_report(report: Report) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = report.report_type.value.title()

    title_font = Font(name='Arial', size=14, bold=True, color='000080')  # Navy blue
    subtitle_font = Font(name='Arial', size=10, italic=True)
    header_font = Font(name='Arial', size=11, bold=True)
    total_font = Font(name='Arial', size=11, bold=True)
    normal_font = Font(name='Arial', size=10)

    header_fill = PatternFill(start_color='E0E0E0', end_color='E0E0E0', fill_type='solid')
    total_fill = PatternFill(start_color='F0F0F0', end_color='F0F0F0', fill_type='solid')

    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    ws["A1"] = report.title
    ws["A1"].font = title_font
    ws["A2"] = f"Generated {report.generated_at.strftime('%d/%m/%Y %H:%M')} UTC"
    ws["A2"].font = subtitle_font

    table = report_table(report)
    width = len(table[0])
    current_row = 4

    for col, heading in enumerate(table[0], start=1):
        cell = ws.cell(row=current_row, column=col, value=heading)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border
        cell.alignment = Alignment(horizontal='center')
    current_row += 1

    for values in table[1:]:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=current_row, column=col, value=value)
            cell.font = normal_font
            cell.border = border
            if isinstance(value, int):
                cell.alignment = Alignment(horizontal='right')
        current_row += 1

    # Add total
    quantity_col = table[0].index("Quantity") + 1
    ws.cell(row=current_row, column=1, value="Total")
    ws.cell(row=current_row, column=quantity_col, value=report.total_quantity)
    for col in range(1, width + 1):
        cell = ws.cell(row=current_row, column=col)
        cell.font = total_font
        cell.fill = total_fill
        cell.border = border

    for col in range(1, width + 1):
        ws.column_dimensions[get_column_letter(col)].width = 22

    buffer = BytesIO()
    wb.save(buffer)
    excel_data = buffer.getvalue()
    buffer.close()
    return excel_data
