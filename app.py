import logging

from flask import Flask, request, jsonify, send_file
from werkzeug.exceptions import RequestEntityTooLarge

from analyzer import (
    RULE_SEVERITY, analyze_log, decode_log_bytes, get_severity, split_log_text
)
from charts import create_category_chart
from config import Config
from exporter import CSV_FILENAME, PDF_FILENAME, export_csv, export_pdf

app = Flask(__name__)
app.config.from_object(Config)


def parse_threshold(raw, default):
    """Brute force threshold from a form value; missing, non-numeric or < 1 uses the default"""
    if raw is None:
        return default
    try:
        value = int(float(str(raw).strip()))
    except (TypeError, ValueError, OverflowError):
        return default
    return value if value >= 1 else default


def _analysis_from_request():
    data = request.get_json(silent=True) or {}
    analysis = data.get('analysis') if isinstance(data, dict) else None
    if not analysis or not isinstance(analysis, dict):
        return None
    return analysis


# ---------------- ANALYSIS ----------------

@app.route('/api/upload-log', methods=['POST'])
def upload_log():
    file = request.files.get('logfile')
    if file is None or file.filename == '':
        return jsonify({'error': 'No log file uploaded.'}), 400

    threshold = parse_threshold(request.form.get('threshold'), app.config['BRUTE_FORCE_THRESHOLD'])

    try:
        lines = split_log_text(decode_log_bytes(file.read()))
        report = analyze_log(lines, threshold)

        response = {
            'analysis': report.to_dict(),
            'lines': lines,
        }
        if app.config['INCLUDE_CHART']:
            response['chart'] = create_category_chart(report)
    except Exception:
        app.logger.exception('Log analysis failed for %s', file.filename)
        return jsonify({'error': 'Log analysis failed.'}), 500

    app.logger.info(
        'Analyzed %s: %d lines, %d findings, %d brute force IPs (threshold %d)',
        file.filename, report.total_lines, report.total_findings,
        len(report.brute_force_ips), threshold
    )
    return jsonify(response)


@app.route('/api/severity-levels', methods=['GET'])
def severity_levels():
    """Severity table used for finding colors and ordering"""
    levels = {}
    for rule in RULE_SEVERITY:
        level, color, rank = get_severity(rule)
        levels[rule] = {'level': level, 'color': color, 'rank': rank}
    return jsonify(levels)


# ---------------- EXPORT ENDPOINTS ----------------

@app.route('/api/download-csv', methods=['POST'])
def download_csv():
    analysis = _analysis_from_request()
    if analysis is None:
        return jsonify({'error': 'No analysis data provided.'}), 400

    try:
        csv_bytes = export_csv(analysis)
    except Exception:
        app.logger.exception('CSV export failed')
        return jsonify({'error': 'Could not generate CSV report.'}), 500

    return send_file(
        csv_bytes,
        mimetype='text/csv',
        as_attachment=True,
        download_name=CSV_FILENAME
    )


@app.route('/api/download-pdf', methods=['POST'])
def download_pdf():
    analysis = _analysis_from_request()
    if analysis is None:
        return jsonify({'error': 'No analysis data provided.'}), 400

    try:
        chart = create_category_chart(analysis) if app.config['INCLUDE_CHART'] else None
        pdf_bytes = export_pdf(analysis, chart=chart)
    except Exception:
        app.logger.exception('PDF export failed')
        return jsonify({'error': 'Could not generate PDF report.'}), 500

    return send_file(
        pdf_bytes,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=PDF_FILENAME
    )


@app.errorhandler(RequestEntityTooLarge)
def file_too_large(e):
    limit_mb = app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
    return jsonify({'error': f'Log file too large (max {limit_mb}MB).'}), 413


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    host = app.config['HOST']
    port = app.config['PORT']

    print("\n" + "="*60)
    print("       LOG THREAT ANALYZER - backend")
    print("="*60)
    print(f"\n[+] Listening on http://{host}:{port}")
    print(f"[+] Brute force threshold: {app.config['BRUTE_FORCE_THRESHOLD']}")
    print("\n[API Endpoints]")
    print("   POST /api/upload-log      - Analyze an uploaded log file")
    print("   POST /api/download-csv    - Export an analysis as CSV")
    print("   POST /api/download-pdf    - Export an analysis as PDF")
    print("   GET  /api/severity-levels - Severity table")
    print("="*60 + "\n")

    app.run(host=host, port=port)
