"""
Report export - flattens an analysis into Type/Severity/Line/IP/Details rows
and renders them as CSV or PDF
"""

import base64
import csv
import io
import logging
from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, Image

from analyzer import SEVERITY_LEVELS, AnalysisReport, get_severity

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Type", "Severity", "Line", "IP", "Details"]
CSV_FILENAME = "log_analysis_report.csv"
PDF_FILENAME = "log_analysis_report.pdf"

# (report key, row type, rule name) in export order
EXPORT_SECTIONS = (
    ('failedLogins', 'Failed Login', 'failedLogin'),
    ('sensitiveAccess', 'Sensitive Access', 'sensitiveAccess'),
    ('sqlInjection', 'SQL Injection', 'sqlInjection'),
    ('xss', 'XSS Attempt', 'xss'),
    ('dirTraversal', 'Directory Traversal', 'dirTraversal'),
    ('suspiciousAgents', 'Suspicious Agent', 'suspiciousAgent'),
)
BRUTE_FORCE_TYPE = 'Brute Force IP'


def _as_dict(analysis):
    if isinstance(analysis, AnalysisReport):
        return analysis.to_dict()
    return analysis


def build_rows(analysis):
    """Flatten an AnalysisReport (or its JSON dict) into export rows"""
    analysis = _as_dict(analysis)
    rows = []

    for key, row_type, rule in EXPORT_SECTIONS:
        default_level = get_severity(rule)[0]
        for item in analysis.get(key) or []:
            line_number = item.get('lineNumber')
            rows.append({
                'Type': row_type,
                'Severity': item.get('severity') or default_level,
                'Line': '' if line_number is None else line_number,
                'IP': item.get('ip') or '',
                'Details': item.get('text', ''),
            })

    default_level = get_severity('bruteForce')[0]
    for item in analysis.get('bruteForceIps') or []:
        rows.append({
            'Type': BRUTE_FORCE_TYPE,
            'Severity': item.get('severity') or default_level,
            'Line': '',
            'IP': item.get('ip', ''),
            'Details': f"{item.get('count', 0)} failed logins",
        })

    return rows


def export_csv_text(analysis):
    """CSV text with a header row followed by one row per finding"""
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS)
    writer.writeheader()
    for row in build_rows(analysis):
        writer.writerow(row)
    return output.getvalue()


def export_csv(analysis):
    """CSV report as an in-memory bytes buffer ready for send_file"""
    csv_bytes = io.BytesIO(export_csv_text(analysis).encode('utf-8'))
    csv_bytes.seek(0)
    return csv_bytes


# ================== PDF REPORT ==================

DARK_NAVY = colors.HexColor('#0a192f')
SLATE = colors.HexColor('#8892b0')
GRID = colors.HexColor('#dee2e6')
ROW_ALT = colors.HexColor('#f8f9fa')

SUMMARY_LABELS = (
    ('failedLogins', 'Failed Logins'),
    ('sensitiveAccess', 'Sensitive Access'),
    ('sqlInjection', 'SQL Injection'),
    ('xss', 'XSS Attempts'),
    ('dirTraversal', 'Directory Traversal'),
    ('suspiciousAgents', 'Suspicious Agents'),
    ('bruteForceIps', 'Brute Force IPs'),
)

MAX_DETAIL_CHARS = 95


def _truncate(text, limit=MAX_DETAIL_CHARS):
    text = str(text)
    return text if len(text) <= limit else text[:limit - 3] + '...'


def _severity_color(level):
    color, _ = SEVERITY_LEVELS.get(level, SEVERITY_LEVELS['Info'])
    return colors.HexColor(color)


def export_pdf(analysis, chart=None):
    """Render the analysis as a PDF report.

    ``chart`` is an optional base64 PNG (see charts.create_category_chart)
    embedded under the summary.
    """
    analysis = _as_dict(analysis)
    rows = build_rows(analysis)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=landscape(A4),
        topMargin=0.5*inch, bottomMargin=0.5*inch,
        leftMargin=0.5*inch, rightMargin=0.5*inch
    )

    styles = getSampleStyleSheet()
    title = ParagraphStyle('ReportTitle', parent=styles['Heading1'],
        fontSize=22, textColor=DARK_NAVY, alignment=TA_CENTER, spaceAfter=6)
    subtitle = ParagraphStyle('ReportSubtitle', parent=styles['Normal'],
        fontSize=9, textColor=SLATE, alignment=TA_CENTER, spaceAfter=14)
    section_title = ParagraphStyle('SectionTitle', parent=styles['Heading2'],
        fontSize=14, textColor=DARK_NAVY, spaceBefore=12, spaceAfter=8)

    story = [
        Paragraph("Log Analysis Report", title),
        Paragraph(f"Generated {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}", subtitle),
    ]

    # ---- summary ----
    summary_rows = [
        ['Total lines', str(analysis.get('totalLines', 0))],
        ['Unique IPs', str(analysis.get('uniqueIps', 0))],
        ['Brute force threshold', str(analysis.get('bruteForceThreshold', ''))],
    ]
    for key, label in SUMMARY_LABELS:
        summary_rows.append([label, str(len(analysis.get(key) or []))])

    summary = Table(summary_rows, colWidths=[2.5*inch, 1.5*inch])
    summary.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('ROWBACKGROUNDS', (0, 0), (-1, -1), [colors.white, ROW_ALT]),
        ('GRID', (0, 0), (-1, -1), 0.5, GRID),
    ]))
    story.append(Paragraph("Summary", section_title))
    story.append(summary)

    if chart:
        try:
            img = Image(io.BytesIO(base64.b64decode(chart)), width=5*inch, height=3.2*inch)
            story.append(Spacer(1, 0.2*inch))
            story.append(img)
        except (ValueError, TypeError, OSError):
            logger.warning("Skipping invalid chart image in PDF report")

    # ---- findings ----
    story.append(Paragraph("Findings", section_title))
    if not rows:
        story.append(Paragraph("No threats detected.", styles['Normal']))
    else:
        table_rows = [CSV_COLUMNS]
        for row in rows:
            table_rows.append([
                row['Type'], row['Severity'], str(row['Line']), row['IP'], _truncate(row['Details'])
            ])

        findings = Table(
            table_rows, repeatRows=1,
            colWidths=[1.5*inch, 0.8*inch, 0.6*inch, 1.2*inch, 6.4*inch]
        )
        findings_style = [
            ('BACKGROUND', (0, 0), (-1, 0), DARK_NAVY),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('FONTNAME', (4, 1), (4, -1), 'Courier'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, ROW_ALT]),
            ('GRID', (0, 0), (-1, -1), 0.5, GRID),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]
        for idx, row in enumerate(rows, start=1):
            findings_style.append(('TEXTCOLOR', (1, idx), (1, idx), _severity_color(row['Severity'])))
            findings_style.append(('FONTNAME', (1, idx), (1, idx), 'Helvetica-Bold'))
        findings.setStyle(TableStyle(findings_style))
        story.append(findings)

    doc.build(story)
    buffer.seek(0)
    return buffer
