from analyzer import analyze_log, split_log_text
from generate_sample_logs import generate_lines, main


def test_generation_is_repeatable_with_seed():
    assert generate_lines(200, seed=42) == generate_lines(200, seed=42)
    assert len(generate_lines(200, seed=42)) == 200


def test_sample_log_exercises_every_detector():
    report = analyze_log(generate_lines(3000, seed=7), brute_force_threshold=5)

    for rule, count in report.category_counts().items():
        assert count > 0, rule
    assert report.total_lines == 3000


def test_main_writes_file(tmp_path, capsys):
    output = tmp_path / "sample.log"

    main(["-o", str(output), "-n", "50", "--seed", "1"])

    lines = split_log_text(output.read_text(encoding="utf-8"))
    assert len(lines) == 50
    assert "Done!" in capsys.readouterr().out
