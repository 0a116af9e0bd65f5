import io
import zipfile
from datetime import date

import pytest
from openpyxl import load_workbook

from resultdesk.models import ExportType
from resultdesk.services.cohort_ranking import rank_cohort
from resultdesk.services.report_generator import (
    bundle_reports,
    format_percentage,
    format_rank,
    generate_combined_report,
    generate_individual_report,
    generate_report,
    generate_summary_report,
    sanitize_filename_part,
    sheet_name_for,
)


def _workbook(content):
    return load_workbook(io.BytesIO(content))


def _pairs(worksheet):
    """Label -> value for two-column rows."""
    return {row[0]: row[1] for row in worksheet.iter_rows(max_col=2, values_only=True) if row[0] is not None}


def test_individual_report(three_students):
    ranked = rank_cohort(three_students)

    workbook = _workbook(generate_individual_report(ranked[1], len(ranked)))

    assert workbook.sheetnames == ["Student Info", "Subject Results", "Performance Analysis"]
    info = _pairs(workbook["Student Info"])
    assert workbook["Student Info"]["A1"].value == "Student Information"
    assert info["Name"] == "Bala"
    assert info["Roll Number"] == "R002"
    assert info["Registration Number"] == "N/A"
    assert info["Percentage"] == "65%"
    assert info["Overall Grade"] == "B"
    assert info["Rank"] == "3/3"

    subjects = workbook["Subject Results"]
    assert [c.value for c in subjects[3]][:3] == ["Course Code", "Subject", "Credits"]
    assert subjects["B4"].value == "Maths"
    assert subjects["A6"].value == "Total"
    assert subjects["G6"].value == 130


def test_individual_report_without_analytics(three_students):
    ranked = rank_cohort(three_students)

    workbook = _workbook(generate_individual_report(ranked[0], len(ranked), include_analytics=False))

    assert workbook.sheetnames == ["Student Info", "Subject Results"]


def test_combined_report(three_students):
    workbook = _workbook(generate_combined_report(rank_cohort(three_students)))

    assert workbook.sheetnames == ["Summary", "Asha", "Bala", "Chitra", "Comparative Analysis"]
    summary = workbook["Summary"]
    assert summary["A1"].value == "Summary of Results"
    assert [summary.cell(row=4, column=c).value for c in (1, 2, 4, 7, 8)] == ["Asha", "R001", "160/200", "S", "2/3"]

    comparison = workbook["Comparative Analysis"]
    rows = list(comparison.iter_rows(values_only=True))
    subject_x = next(row for row in rows if row[0] == "Subject X")
    assert list(subject_x) == ["Subject X", "80%", "60%", "N/A", "70%"]
    grade_row = next(row for row in rows if row[0] == "Overall Grade")
    assert list(grade_row) == ["Overall Grade", "S", "B", "S", "S"]


def test_summary_report(three_students):
    workbook = _workbook(generate_summary_report(rank_cohort(three_students), include_comparison=False))

    assert workbook.sheetnames == ["Summary"]
    pairs = _pairs(workbook["Summary"])
    assert pairs["Total Students"] == 3
    assert pairs["Average SGPA"] == "8.83"
    assert pairs["Pass Percentage"] == "100.00%"


def test_empty_cohort_cannot_be_exported():
    with pytest.raises(ValueError):
        generate_combined_report([])
    with pytest.raises(ValueError):
        generate_summary_report([])
    with pytest.raises(ValueError):
        generate_report(ExportType.SUMMARY, [])


def test_generate_report_file_names(three_students):
    ranked = rank_cohort(three_students)
    report_date = date(2025, 1, 15)

    individual = generate_report(ExportType.INDIVIDUAL, ranked, report_date=report_date)
    combined = generate_report(ExportType.COMBINED, ranked, report_date=report_date)
    summary = generate_report(ExportType.SUMMARY, ranked, report_date=report_date)

    assert [name for name, _ in individual] == [
        "Result_Asha_R001_2025-01-15.xlsx",
        "Result_Bala_R002_2025-01-15.xlsx",
        "Result_Chitra_R003_2025-01-15.xlsx",
    ]
    assert [name for name, _ in combined] == ["Combined_Results_2025-01-15.xlsx"]
    assert [name for name, _ in summary] == ["Results_Summary_2025-01-15.xlsx"]


def test_bundle_reports_keeps_every_file():
    archive = bundle_reports([("a.xlsx", b"one"), ("a.xlsx", b"two"), ("b.xlsx", b"three")])

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert zf.namelist() == ["a.xlsx", "a_2.xlsx", "b.xlsx"]
        assert zf.read("a_2.xlsx") == b"two"


def test_bundle_reports_renames_any_duplicate():
    archive = bundle_reports([("notes", b"1"), ("notes", b"2"), ("notes", b"3"), ("r.csv", b"4"), ("r.csv", b"5")])

    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        assert zf.namelist() == ["notes", "notes_2", "notes_3", "r.csv", "r_2.csv"]


def test_sheet_names_are_unique_and_short():
    used = {"summary"}

    assert sheet_name_for("Summary", used) == "Summary (2)"
    assert sheet_name_for("MUDIGALLU RAGHAVENDRA", used) == "MUDIGALLU RAGHAVENDR"
    assert sheet_name_for("MUDIGALLU RAGHAVENDRA", used) == "MUDIGALLU RAGHAVENDR (2)"
    assert sheet_name_for("a/b", used) == "ab"


def test_formatting_helpers():
    assert format_percentage(82) == "82%"
    assert format_percentage(78.33) == "78.33%"
    assert format_percentage(None) == "N/A"
    assert format_rank(2, 10) == "2/10"
    assert sanitize_filename_part('G TAUFIQ: "UMAR"') == "G_TAUFIQ_UMAR"
