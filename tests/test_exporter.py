import csv
import io

from analyzer import analyze_log
from charts import create_category_chart
from exporter import CSV_COLUMNS, build_rows, export_csv, export_csv_text, export_pdf


LINES = [
    "Failed password for root from 9.9.9.9 port 22",
    "Failed password for root from 9.9.9.9 port 22",
    'GET /admin/config.php HTTP/1.1" 200 "-" "sqlmap/1.5"',
    "GET /search?q=1 UNION SELECT '<script>alert(1)</script>'",
    "GET /download?file=../../etc/passwd",
]


def _report(threshold=2):
    return analyze_log(LINES, brute_force_threshold=threshold)


def test_rows_follow_category_order():
    rows = build_rows(_report())

    assert [row["Type"] for row in rows] == [
        "Failed Login",
        "Failed Login",
        "Sensitive Access",
        "SQL Injection",
        "XSS Attempt",
        "Directory Traversal",
        "Suspicious Agent",
        "Brute Force IP",
    ]


def test_row_fields_match_findings():
    rows = build_rows(_report())

    assert rows[0] == {
        "Type": "Failed Login",
        "Severity": "Medium",
        "Line": 1,
        "IP": "9.9.9.9",
        "Details": LINES[0],
    }
    assert rows[3]["Severity"] == "Critical"
    assert rows[3]["Line"] == 4
    assert rows[-1] == {
        "Type": "Brute Force IP",
        "Severity": "High",
        "Line": "",
        "IP": "9.9.9.9",
        "Details": "2 failed logins",
    }


def test_row_count_matches_findings_and_brute_force_entries():
    report = _report()

    assert len(build_rows(report)) == report.total_findings + len(report.brute_force_ips)


def test_rows_from_wire_dict_equal_rows_from_report():
    report = _report()

    assert build_rows(report.to_dict()) == build_rows(report)


def test_wire_dict_with_missing_categories():
    analysis = {
        "xss": [{"lineNumber": 3, "text": "<svg>"}],
        "bruteForceIps": [{"ip": "1.2.3.4", "count": 7}],
    }

    rows = build_rows(analysis)

    assert rows == [
        {"Type": "XSS Attempt", "Severity": "High", "Line": 3, "IP": "", "Details": "<svg>"},
        {"Type": "Brute Force IP", "Severity": "High", "Line": "", "IP": "1.2.3.4", "Details": "7 failed logins"},
    ]


def test_csv_text_has_header_and_one_row_per_finding():
    report = _report()

    text = export_csv_text(report)
    parsed = list(csv.DictReader(io.StringIO(text)))

    assert text.splitlines()[0] == "Type,Severity,Line,IP,Details"
    assert len(parsed) == report.total_findings + len(report.brute_force_ips)
    assert parsed[3]["Details"] == LINES[3]
    assert parsed[-1]["Line"] == ""


def test_csv_for_empty_report_is_header_only():
    text = export_csv_text(analyze_log(["nothing to see"]))

    assert list(csv.reader(io.StringIO(text))) == [CSV_COLUMNS]


def test_export_csv_returns_utf8_buffer():
    buffer = export_csv(analyze_log(["GET /admin é"]))

    assert buffer.read().decode("utf-8").endswith("GET /admin é\r\n")


def test_export_pdf_produces_pdf_document():
    buffer = export_pdf(_report())

    assert buffer.getvalue().startswith(b"%PDF")


def test_export_pdf_with_chart_and_no_findings():
    report = _report()
    with_chart = export_pdf(report, chart=create_category_chart(report))
    empty = export_pdf(analyze_log(["INFO nothing"]))

    assert with_chart.getvalue().startswith(b"%PDF")
    assert empty.getvalue().startswith(b"%PDF")
