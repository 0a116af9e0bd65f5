"""
Service for exporting processed results to Excel.

Three export types:
- individual: one workbook per student (student info, subject results, performance analysis)
- combined: class summary, one sheet per student, comparative analysis
- summary: class summary and comparative analysis only

Sheets are laid out as rows, written with pandas' openpyxl engine and then
styled through the openpyxl worksheet.
"""

import io
import logging
import re
import zipfile
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from resultdesk.models import ExportType
from resultdesk.schemas.student import RankedStudent, StudentAggregate
from resultdesk.services.class_statistics import summarize_cohort
from resultdesk.services.comparison import build_comparison
from resultdesk.services.student_analysis import analyze_student

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
MAX_SHEET_NAME_LENGTH = 31
STUDENT_SHEET_NAME_LENGTH = 20

TITLE_FONT = Font(bold=True, size=14)
HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
SECTION_FONT = Font(bold=True)
SECTION_FILL = PatternFill(start_color="E7E6E6", end_color="E7E6E6", fill_type="solid")
STRIPE_FILL = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
TOTAL_FONT = Font(bold=True)
TOTAL_FILL = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
TOTAL_BORDER = Border(top=Side(style="thin"), bottom=Side(style="thin"))

SUBJECT_HEADER = ["Course Code", "Subject", "Credits", "Type", "Internal", "External", "Total", "Grade", "Grade Points"]
SUBJECT_COLUMN_WIDTHS = [15, 40, 10, 12, 12, 12, 12, 10, 14]
SUMMARY_HEADER = [
    "Student Name",
    "Roll Number",
    "Registration Number",
    "Total Marks",
    "SGPA",
    "Percentage",
    "Grade",
    "Rank",
]
SUMMARY_COLUMN_WIDTHS = [28, 15, 20, 14, 10, 12, 10, 10]


def display(value: Any) -> Any:
    """Render a missing value for a report cell."""
    if value is None or value == "":
        return NOT_AVAILABLE
    return value


def format_percentage(value: float | int | None) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, float) and not value.is_integer():
        return f"{value:.2f}%"
    return f"{int(value)}%"


def format_rank(rank: int | None, total_students: int) -> str:
    if rank is None:
        return NOT_AVAILABLE
    return f"{rank}/{total_students}"


class SheetLayout:
    """Rows of one worksheet plus the styling each row needs."""

    def __init__(self, column_widths: Sequence[int]):
        self.rows: list[list[Any]] = []
        self.column_widths = list(column_widths)
        # row index -> (style, number of styled columns)
        self.styles: dict[int, tuple[str, int]] = {}
        self._stripe = 0

    @property
    def span(self) -> int:
        return len(self.column_widths)

    def _add(self, values: list[Any], style: str | None = None, columns: int | None = None) -> None:
        if style is not None:
            self.styles[len(self.rows)] = (style, columns or len(values))
        self.rows.append(values)

    def title(self, text: str) -> None:
        self._add([text], "title", self.span)

    def section(self, text: str) -> None:
        self._add([text], "section", self.span)

    def blank(self) -> None:
        self._add([])

    def header(self, values: list[Any]) -> None:
        self._stripe = 0
        self._add(values, "header")

    def data(self, values: list[Any]) -> None:
        self._add([display(v) for v in values], "stripe" if self._stripe % 2 == 1 else None)
        self._stripe += 1

    def total(self, values: list[Any]) -> None:
        self._add(values, "total")

    def pair(self, label: str, value: Any) -> None:
        self._add([label, display(value)])


def _style_row(worksheet, row_number: int, style: str, columns: int) -> None:
    if style in ("title", "section"):
        cell = worksheet.cell(row=row_number, column=1)
        cell.font = TITLE_FONT if style == "title" else SECTION_FONT
        if style == "title":
            cell.alignment = Alignment(horizontal="center")
        else:
            cell.fill = SECTION_FILL
        if columns > 1:
            worksheet.merge_cells(start_row=row_number, start_column=1, end_row=row_number, end_column=columns)
        return

    for column in range(1, columns + 1):
        cell = worksheet.cell(row=row_number, column=column)
        if style == "header":
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal="center", vertical="center")
        elif style == "total":
            cell.font = TOTAL_FONT
            cell.fill = TOTAL_FILL
            cell.border = TOTAL_BORDER
        elif style == "stripe":
            cell.fill = STRIPE_FILL


def write_sheet(writer: pd.ExcelWriter, sheet_name: str, layout: SheetLayout) -> None:
    """Write a layout to a new worksheet and apply its styling."""
    df = pd.DataFrame(layout.rows, dtype=object)
    df.to_excel(writer, sheet_name=sheet_name, index=False, header=False)

    worksheet = writer.sheets[sheet_name]
    for row_index, (style, columns) in layout.styles.items():
        _style_row(worksheet, row_index + 1, style, columns)

    for idx, width in enumerate(layout.column_widths, 1):
        worksheet.column_dimensions[get_column_letter(idx)].width = width


def sanitize_filename_part(text: str) -> str:
    """
    Sanitize a string to be safe for use in filenames.
    Replaces spaces with underscores and removes invalid characters.
    """
    if not text:
        return ""
    text = text.replace(" ", "_")
    text = re.sub(r'[<>:"/\\|?*]', "", text)
    text = re.sub(r"_+", "_", text)
    return text.strip("_")


def sheet_name_for(name: str, used: set[str]) -> str:
    """Excel-safe, unique sheet name for a student."""
    base = re.sub(r"[\[\]:*?/\\]", "", name).strip()[:STUDENT_SHEET_NAME_LENGTH] or "Result"
    candidate = base
    counter = 2
    while candidate.lower() in used:
        suffix = f" ({counter})"
        candidate = f"{base[: MAX_SHEET_NAME_LENGTH - len(suffix)]}{suffix}"
        counter += 1
    used.add(candidate.lower())
    return candidate


def _subject_rows(layout: SheetLayout, aggregate: StudentAggregate) -> None:
    layout.header(SUBJECT_HEADER)
    for subject in aggregate.subjects:
        layout.data(
            [
                subject.course_code,
                subject.name,
                subject.credits,
                subject.subject_type.value,
                subject.internal_marks,
                subject.external_marks,
                subject.marks_obtained,
                subject.grade.value,
                subject.grade_points,
            ]
        )
    if aggregate.subjects:
        layout.total(
            [
                "Total",
                "",
                aggregate.total_credits,
                "",
                sum(s.internal_marks for s in aggregate.subjects),
                sum(s.external_marks for s in aggregate.subjects),
                aggregate.total_marks_obtained,
                aggregate.overall_grade.value,
                aggregate.total_grade_points,
            ]
        )


def student_info_layout(ranked: RankedStudent, total_students: int) -> SheetLayout:
    aggregate = ranked.aggregate
    info = aggregate.student_info
    layout = SheetLayout([24, 40])
    layout.title("Student Information")
    layout.pair("Name", info.name)
    layout.pair("Roll Number", info.roll_number)
    layout.pair("Registration Number", info.registration_number)
    layout.pair("Class/Section", info.class_name)
    layout.pair("Academic Year", info.academic_year)
    layout.pair("Examination", info.examination)
    layout.blank()
    layout.section("Result Summary")
    layout.pair("Total Marks Obtained", aggregate.total_marks_obtained)
    layout.pair("Total Marks", aggregate.total_marks)
    layout.pair("Total Credits", aggregate.total_credits)
    layout.pair("Total Grade Points", aggregate.total_grade_points)
    layout.pair("SGPA", aggregate.sgpa)
    layout.pair("Percentage", format_percentage(aggregate.percentage))
    layout.pair("Overall Grade", aggregate.overall_grade.value)
    layout.pair("Rank", format_rank(ranked.rank, total_students))
    return layout


def subject_results_layout(aggregate: StudentAggregate) -> SheetLayout:
    layout = SheetLayout(SUBJECT_COLUMN_WIDTHS)
    layout.title(f"Subject-wise Results for {display(aggregate.student_info.class_name)}")
    layout.blank()
    _subject_rows(layout, aggregate)
    layout.blank()
    layout.pair("SGPA", aggregate.sgpa)
    layout.pair("Percentage", format_percentage(aggregate.percentage))
    return layout


def performance_layout(aggregate: StudentAggregate) -> SheetLayout:
    performance = analyze_student(aggregate)
    layout = SheetLayout([40, 15, 22])
    layout.title("Subject-wise Performance Analysis")
    layout.blank()
    layout.header(["Subject", "Percentage", "Performance Level"])
    for subject in performance.subjects:
        layout.data([subject.name, format_percentage(subject.percentage), subject.performance_level.value])
    layout.blank()
    layout.section("Strengths and Areas for Improvement")
    layout.blank()
    layout.section("Strengths")
    for subject in performance.strengths:
        layout.pair(subject.name, format_percentage(subject.percentage))
    layout.blank()
    layout.section("Areas for Improvement")
    for subject in performance.improvements:
        layout.pair(subject.name, format_percentage(subject.percentage))
    return layout


def student_result_layout(ranked: RankedStudent, total_students: int) -> SheetLayout:
    """One student's sheet inside the combined workbook."""
    aggregate = ranked.aggregate
    info = aggregate.student_info
    layout = SheetLayout(SUBJECT_COLUMN_WIDTHS)
    layout.title(f"Result: {info.name}")
    layout.blank()
    layout.section("Student Information")
    layout.pair("Name", info.name)
    layout.pair("Roll Number", info.roll_number)
    layout.pair("Registration Number", info.registration_number)
    layout.pair("Class/Section", info.class_name)
    layout.blank()
    layout.section("Subject Results")
    _subject_rows(layout, aggregate)
    layout.blank()
    layout.pair("SGPA", aggregate.sgpa)
    layout.pair("Percentage", format_percentage(aggregate.percentage))
    layout.pair("Rank", format_rank(ranked.rank, total_students))
    return layout


def summary_layout(ranked: Sequence[RankedStudent]) -> SheetLayout:
    cohort = [r.aggregate for r in ranked]
    statistics = summarize_cohort(cohort)
    total_students = len(ranked)

    layout = SheetLayout(SUMMARY_COLUMN_WIDTHS)
    layout.title("Summary of Results")
    layout.blank()
    layout.header(SUMMARY_HEADER)
    for r in ranked:
        info = r.aggregate.student_info
        layout.data(
            [
                info.name,
                info.roll_number,
                info.registration_number,
                f"{r.aggregate.total_marks_obtained}/{r.aggregate.total_marks}",
                r.aggregate.sgpa,
                format_percentage(r.aggregate.percentage),
                r.aggregate.overall_grade.value,
                format_rank(r.rank, total_students),
            ]
        )

    layout.blank()
    layout.section("Overall Class Statistics")
    layout.blank()
    layout.pair("Total Students", statistics.total_students)
    layout.pair("Average SGPA", f"{statistics.average_sgpa:.2f}")
    layout.pair("Average Percentage", f"{statistics.average_percentage:.2f}%")
    layout.pair("Pass Percentage", f"{statistics.pass_percentage:.2f}%")

    layout.blank()
    layout.section("Grade Distribution")
    layout.blank()
    layout.header(["Grade", "Students", "Share"])
    for grade, count in statistics.grade_histogram.items():
        layout.data([grade, count, f"{statistics.grade_percentages[grade]:.2f}%"])
    return layout


def comparative_layout(ranked: Sequence[RankedStudent]) -> SheetLayout:
    table = build_comparison([r.aggregate for r in ranked])
    layout = SheetLayout([40] + [18] * len(table.students) + [15])
    layout.title("Comparative Analysis of Results")
    layout.blank()
    layout.section("Subject-wise Performance Comparison")
    layout.blank()
    layout.header(["Subject", *table.students, "Class Average"])
    for row in table.subject_rows:
        layout.data([row.label, *(format_percentage(v) for v in row.values), format_percentage(row.class_average)])

    layout.blank()
    layout.section("Overall Performance Comparison")
    layout.blank()
    layout.header(["Metric", *table.students, "Class Average"])
    sgpa_row, percentage_row, grade_row = table.metric_rows
    layout.data([sgpa_row.label, *(f"{v:.2f}" for v in sgpa_row.values), f"{sgpa_row.class_average:.2f}"])
    layout.data(
        [
            percentage_row.label,
            *(format_percentage(v) for v in percentage_row.values),
            format_percentage(percentage_row.class_average),
        ]
    )
    layout.data([grade_row.label, *grade_row.values, grade_row.class_average])
    return layout


def _workbook_bytes(sheets: list[tuple[str, SheetLayout]]) -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for sheet_name, layout in sheets:
            write_sheet(writer, sheet_name, layout)
    output.seek(0)
    return output.getvalue()


def generate_individual_report(ranked: RankedStudent, total_students: int, include_analytics: bool = True) -> bytes:
    """
    Generate one student's workbook.

    Args:
        ranked: The student's result with its cohort rank
        total_students: Cohort size, shown next to the rank
        include_analytics: Add the performance analysis sheet

    Returns:
        Bytes of Excel file
    """
    sheets = [
        ("Student Info", student_info_layout(ranked, total_students)),
        ("Subject Results", subject_results_layout(ranked.aggregate)),
    ]
    if include_analytics:
        sheets.append(("Performance Analysis", performance_layout(ranked.aggregate)))
    return _workbook_bytes(sheets)


def generate_combined_report(ranked: Sequence[RankedStudent], include_comparison: bool = True) -> bytes:
    """
    Generate the combined workbook: summary, one sheet per student, comparison.

    Raises:
        ValueError: If there are no results to export
    """
    if not ranked:
        raise ValueError("No results to export")

    used = {"summary", "comparative analysis"}
    sheets = [("Summary", summary_layout(ranked))]
    for r in ranked:
        sheets.append((sheet_name_for(r.aggregate.student_info.name, used), student_result_layout(r, len(ranked))))
    if include_comparison:
        sheets.append(("Comparative Analysis", comparative_layout(ranked)))
    return _workbook_bytes(sheets)


def generate_summary_report(ranked: Sequence[RankedStudent], include_comparison: bool = True) -> bytes:
    """
    Generate the summary workbook: class summary and comparison.

    Raises:
        ValueError: If there are no results to export
    """
    if not ranked:
        raise ValueError("No results to export")

    sheets = [("Summary", summary_layout(ranked))]
    if include_comparison:
        sheets.append(("Comparative Analysis", comparative_layout(ranked)))
    return _workbook_bytes(sheets)


def individual_report_filename(aggregate: StudentAggregate, report_date: date | None = None) -> str:
    report_date = report_date or date.today()
    name = sanitize_filename_part(aggregate.student_info.name) or "Unknown"
    roll_number = sanitize_filename_part(aggregate.student_info.roll_number)
    return f"Result_{name}_{roll_number}_{report_date.isoformat()}.xlsx"


def combined_report_filename(report_date: date | None = None) -> str:
    return f"Combined_Results_{(report_date or date.today()).isoformat()}.xlsx"


def summary_report_filename(report_date: date | None = None) -> str:
    return f"Results_Summary_{(report_date or date.today()).isoformat()}.xlsx"


def generate_report(
    export_type: ExportType,
    ranked: Sequence[RankedStudent],
    *,
    include_analytics: bool = True,
    include_comparison: bool = True,
    report_date: date | None = None,
) -> list[tuple[str, bytes]]:
    """
    Generate the workbooks for an export type.

    Returns:
        List of (filename, content); one entry per student for individual
        exports, a single entry otherwise

    Raises:
        ValueError: If there are no results to export
    """
    if not ranked:
        raise ValueError("No results to export")

    logger.info(f"Generating {export_type.value} report for {len(ranked)} results")
    if export_type == ExportType.INDIVIDUAL:
        return [
            (
                individual_report_filename(r.aggregate, report_date),
                generate_individual_report(r, len(ranked), include_analytics),
            )
            for r in ranked
        ]
    if export_type == ExportType.COMBINED:
        return [(combined_report_filename(report_date), generate_combined_report(ranked, include_comparison))]
    return [(summary_report_filename(report_date), generate_summary_report(ranked, include_comparison))]


def bundle_reports(reports: Sequence[tuple[str, bytes]]) -> bytes:
    """Pack several workbooks into one ZIP archive."""
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as zf:
        used: set[str] = set()
        for filename, content in reports:
            path = Path(filename)
            name = filename
            counter = 2
            while name in used:
                name = str(path.with_name(f"{path.stem}_{counter}{path.suffix}"))
                counter += 1
            used.add(name)
            zf.writestr(name, content)
    output.seek(0)
    return output.getvalue()
