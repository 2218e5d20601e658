import base64
from concurrent.futures import ThreadPoolExecutor

from analyzer import analyze_log
from charts import category_frame, create_category_chart


def test_category_frame_counts_every_category():
    report = analyze_log(["GET /admin", "GET /wp-login.php", "<svg>"])

    df = category_frame(report)

    counts = dict(zip(df["Category"], df["Count"]))
    assert counts["Sensitive Access"] == 2
    assert counts["XSS"] == 1
    assert counts["Brute Force IPs"] == 0
    assert len(df) == 7


def test_category_frame_accepts_wire_dict():
    report = analyze_log(["GET /admin", "../x"])

    assert category_frame(report.to_dict()).equals(category_frame(report))


def test_chart_is_base64_png():
    chart = create_category_chart(analyze_log(["GET /admin", "GET /etc/passwd"]))

    assert base64.b64decode(chart).startswith(b"\x89PNG")


def test_no_chart_without_findings():
    assert create_category_chart(analyze_log(["INFO all quiet"])) is None
    assert create_category_chart({}) is None


def test_chart_rendering_leaves_no_pyplot_figures():
    import matplotlib.pyplot as plt

    plt.close("all")
    create_category_chart(analyze_log(["GET /admin"]))

    assert plt.get_fignums() == []


def test_charts_render_concurrently():
    reports = [analyze_log(["GET /admin"] * n + ["<svg>"]) for n in range(1, 9)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        charts = list(pool.map(create_category_chart, reports))

    assert all(base64.b64decode(chart).startswith(b"\x89PNG") for chart in charts)
