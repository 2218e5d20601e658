"""
Log Threat Analyzer - signature based classification of log lines
Scans each line against independent threat rules and aggregates failed logins
into brute-force sources
"""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BRUTE_FORCE_THRESHOLD = 5

# ---------------- REGEX PATTERNS ----------------
# All patterns use ASCII semantics for \d, \b, \s and case folding

IP_PATTERN = re.compile(r'(\d+\.\d+\.\d+\.\d+)', re.ASCII)

FAILED_LOGIN_PATTERN = re.compile(r'Failed password.*from (\d+\.\d+\.\d+\.\d+)', re.ASCII)

SENSITIVE_PATH_PATTERN = re.compile(r'(/admin|/wp-login\.php)', re.IGNORECASE | re.ASCII)

SQLI_PATTERN = re.compile(
    r"('|%27).*(--|%2D%2D|\bOR\b|\bAND\b).*('|%27)"
    r'|UNION\s+SELECT|information_schema|sleep\(|benchmark\(|\b1=1\b',
    re.IGNORECASE | re.ASCII
)

XSS_PATTERN = re.compile(
    r'<script|onerror=|alert\s*\(|<img|<svg|document\.cookie',
    re.IGNORECASE | re.ASCII
)

DIR_TRAVERSAL_PATTERN = re.compile(
    r'\.\./|\.\.\\|/etc/passwd|c:\\windows\\system32',
    re.IGNORECASE | re.ASCII
)

# Common log format: ... "referrer" "user agent" at end of line
USER_AGENT_PATTERN = re.compile(r'"[^"]*"\s*"([^"]+)"$', re.ASCII)

SCANNER_AGENTS = (
    "sqlmap", "acunetix", "nikto", "fuzz", "scanner", "nmap"
)

# ---------------- SEVERITY TABLE ----------------

SEVERITY_LEVELS = {
    'Critical': ('#FF4444', 5),
    'High': ('#FF8800', 4),
    'Medium': ('#FFCC00', 3),
    'Low': ('#0099CC', 2),
    'Info': ('#A0A0A0', 1),
}

RULE_SEVERITY = {
    'sqlInjection': 'Critical',
    'xss': 'High',
    'dirTraversal': 'High',
    'bruteForce': 'High',
    'failedLogin': 'Medium',
    'suspiciousAgent': 'Medium',
    'sensitiveAccess': 'Low',
}

# Report key for each per-line rule, in report order
CATEGORY_KEYS = {
    'failedLogin': 'failedLogins',
    'sensitiveAccess': 'sensitiveAccess',
    'sqlInjection': 'sqlInjection',
    'xss': 'xss',
    'dirTraversal': 'dirTraversal',
    'suspiciousAgent': 'suspiciousAgents',
}


def get_severity(rule):
    """Return (level, color, rank) for a rule name; unknown rules are Info"""
    level = RULE_SEVERITY.get(rule, 'Info')
    color, rank = SEVERITY_LEVELS[level]
    return level, color, rank


# ---------------- DATA MODEL ----------------

@dataclass(frozen=True)
class Finding:
    line_number: int
    text: str
    severity: str
    color: str
    ip: str | None = None

    def to_dict(self):
        return {
            'lineNumber': self.line_number,
            'ip': self.ip,
            'text': self.text,
            'severity': self.severity,
            'color': self.color,
        }


@dataclass(frozen=True)
class BruteForceEntry:
    ip: str
    count: int
    severity: str
    color: str

    def to_dict(self):
        return {
            'ip': self.ip,
            'count': self.count,
            'severity': self.severity,
            'color': self.color,
        }


@dataclass(frozen=True)
class AnalysisReport:
    total_lines: int
    unique_ips: int
    brute_force_threshold: int
    failed_logins: tuple = ()
    sensitive_access: tuple = ()
    sql_injection: tuple = ()
    xss: tuple = ()
    dir_traversal: tuple = ()
    suspicious_agents: tuple = ()
    brute_force_ips: tuple = ()

    def findings(self, rule):
        """Findings recorded for a per-line rule name (e.g. 'xss')"""
        return getattr(self, _RULE_ATTRS[rule])

    @property
    def total_findings(self):
        return sum(len(self.findings(rule)) for rule in CATEGORY_KEYS)

    def category_counts(self):
        """Counts per rule name, brute-force sources included, in report order"""
        counts = {rule: len(self.findings(rule)) for rule in CATEGORY_KEYS}
        counts['bruteForce'] = len(self.brute_force_ips)
        return counts

    def to_dict(self):
        data = {
            'totalLines': self.total_lines,
            'uniqueIps': self.unique_ips,
        }
        for rule, key in CATEGORY_KEYS.items():
            data[key] = [f.to_dict() for f in self.findings(rule)]
        data['bruteForceIps'] = [entry.to_dict() for entry in self.brute_force_ips]
        data['bruteForceThreshold'] = self.brute_force_threshold
        return data


_RULE_ATTRS = {
    'failedLogin': 'failed_logins',
    'sensitiveAccess': 'sensitive_access',
    'sqlInjection': 'sql_injection',
    'xss': 'xss',
    'dirTraversal': 'dir_traversal',
    'suspiciousAgent': 'suspicious_agents',
}


# ---------------- RULES ----------------
# Each rule takes (line, line_number, ip) where ip is the first address on the
# line, and returns a Finding or None.

def _finding(rule, line, line_number, ip):
    level, color, _ = get_severity(rule)
    return Finding(line_number=line_number, text=line, severity=level, color=color, ip=ip)


def _match_failed_login(line, line_number, ip):
    # keyed to the source address, not the first one on the line
    m = FAILED_LOGIN_PATTERN.search(line)
    return _finding('failedLogin', line, line_number, m.group(1)) if m else None


def _match_sensitive_access(line, line_number, ip):
    if SENSITIVE_PATH_PATTERN.search(line):
        return _finding('sensitiveAccess', line, line_number, ip)
    return None


def _match_sql_injection(line, line_number, ip):
    if SQLI_PATTERN.search(line):
        return _finding('sqlInjection', line, line_number, ip)
    return None


def _match_xss(line, line_number, ip):
    if XSS_PATTERN.search(line):
        return _finding('xss', line, line_number, ip)
    return None


def _match_dir_traversal(line, line_number, ip):
    if DIR_TRAVERSAL_PATTERN.search(line):
        return _finding('dirTraversal', line, line_number, ip)
    return None


def _match_suspicious_agent(line, line_number, ip):
    m = USER_AGENT_PATTERN.search(line)
    if not m:
        return None
    agent = m.group(1).lower()
    if any(bad in agent for bad in SCANNER_AGENTS):
        return _finding('suspiciousAgent', line, line_number, ip)
    return None


RULES = (
    ('failedLogin', _match_failed_login),
    ('sensitiveAccess', _match_sensitive_access),
    ('sqlInjection', _match_sql_injection),
    ('xss', _match_xss),
    ('dirTraversal', _match_dir_traversal),
    ('suspiciousAgent', _match_suspicious_agent),
)


def extract_ip(line):
    """First dotted-quad in the line (octets are not range checked)"""
    m = IP_PATTERN.search(line)
    return m.group(1) if m else None


def classify_line(line, line_number):
    """Evaluate every rule against one line.

    Returns a list of (rule, Finding) pairs; a line can hit several rules.
    """
    ip = extract_ip(line)
    hits = []
    for rule, match in RULES:
        finding = match(line, line_number, ip)
        if finding is not None:
            hits.append((rule, finding))
    return hits


def analyze_log(lines, brute_force_threshold=DEFAULT_BRUTE_FORCE_THRESHOLD):
    """Scan log lines and build an AnalysisReport.

    ``lines`` is the already filtered line sequence (no empty lines); line
    numbers in the report are 1-based positions in it. An IP is reported as a
    brute-force source once its failed login count reaches
    ``brute_force_threshold``.
    """
    if brute_force_threshold < 1:
        raise ValueError(f'brute force threshold must be >= 1, got {brute_force_threshold}')

    categories = {rule: [] for rule in CATEGORY_KEYS}
    failed_counts = {}
    all_ips = set()
    total = 0

    for idx, line in enumerate(lines, start=1):
        total += 1
        ip = extract_ip(line)
        if ip:
            all_ips.add(ip)

        for rule, finding in classify_line(line, idx):
            categories[rule].append(finding)
            if rule == 'failedLogin':
                failed_counts[finding.ip] = failed_counts.get(finding.ip, 0) + 1

    level, color, _ = get_severity('bruteForce')
    brute_force = tuple(
        BruteForceEntry(ip=ip, count=count, severity=level, color=color)
        for ip, count in failed_counts.items()
        if count >= brute_force_threshold
    )

    report = AnalysisReport(
        total_lines=total,
        unique_ips=len(all_ips),
        brute_force_threshold=brute_force_threshold,
        failed_logins=tuple(categories['failedLogin']),
        sensitive_access=tuple(categories['sensitiveAccess']),
        sql_injection=tuple(categories['sqlInjection']),
        xss=tuple(categories['xss']),
        dir_traversal=tuple(categories['dirTraversal']),
        suspicious_agents=tuple(categories['suspiciousAgent']),
        brute_force_ips=brute_force,
    )
    logger.debug(
        'Analyzed %d lines: %d findings, %d brute force sources',
        total, report.total_findings, len(brute_force)
    )
    return report


# ---------------- INPUT HELPERS ----------------

LINE_SPLIT_PATTERN = re.compile(r'\r?\n')


def decode_log_bytes(data):
    """Decode uploaded bytes; malformed UTF-8 is replaced, never fatal"""
    return data.decode('utf-8', errors='replace')


def split_log_text(text):
    """Split a document into lines on \\r?\\n and drop empty lines"""
    return [line for line in LINE_SPLIT_PATTERN.split(text) if line]
