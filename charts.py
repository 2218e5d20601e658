"""
Findings chart rendering for analysis responses and PDF reports
"""

import base64
import io

import pandas as pd
import matplotlib as mpl
from matplotlib.figure import Figure
from matplotlib.ticker import MaxNLocator

from analyzer import CATEGORY_KEYS, AnalysisReport, get_severity

mpl.rcParams.update({
    "axes.titlesize": 9,
    "axes.labelsize": 8,
    "xtick.labelsize": 7,
    "ytick.labelsize": 7
})

CATEGORY_LABELS = {
    'failedLogin': 'Failed Logins',
    'sensitiveAccess': 'Sensitive Access',
    'sqlInjection': 'SQL Injection',
    'xss': 'XSS',
    'dirTraversal': 'Dir Traversal',
    'suspiciousAgent': 'Suspicious Agents',
    'bruteForce': 'Brute Force IPs',
}

_WIRE_KEYS = {**CATEGORY_KEYS, 'bruteForce': 'bruteForceIps'}


def category_frame(report):
    """DataFrame of Category/Count/Color rows for an AnalysisReport or its dict form"""
    if isinstance(report, AnalysisReport):
        counts = report.category_counts()
    else:
        counts = {rule: len(report.get(key) or []) for rule, key in _WIRE_KEYS.items()}

    rows = []
    for rule, count in counts.items():
        _, color, _ = get_severity(rule)
        rows.append((CATEGORY_LABELS[rule], count, color))
    return pd.DataFrame(rows, columns=["Category", "Count", "Color"])


def create_category_chart(report):
    """Create a base64 encoded bar chart of findings per category.

    Returns None when there is nothing to plot.
    """
    df = category_frame(report)
    if df["Count"].sum() == 0:
        return None

    df = df.iloc[::-1]  # first category on top

    # not registered with pyplot, so nothing is shared between requests
    fig = Figure(figsize=(5, 3.2))
    ax = fig.subplots()
    ax.barh(df["Category"], df["Count"], height=0.55, color=list(df["Color"]))
    ax.set_xlabel("Findings", color='#333')
    ax.set_title("Findings by Category", fontweight='bold', color='#0a192f')
    ax.xaxis.set_major_locator(MaxNLocator(integer=True))

    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    for spine in ("left", "bottom"):
        ax.spines[spine].set_color('#ccc')
    fig.patch.set_facecolor('white')
    ax.set_facecolor('#fafafa')
    fig.tight_layout()

    # Convert to base64
    img = io.BytesIO()
    fig.savefig(img, format='png', dpi=100)
    img.seek(0)

    return base64.b64encode(img.getvalue()).decode()
