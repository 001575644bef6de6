import sys
import json
import subprocess
from pathlib import Path


def run_cli(args, cwd=None, stdin=None):
    proc = subprocess.run([sys.executable, "-m", "kthselect.cli", *args], capture_output=True, text=True, cwd=cwd, input=stdin)
    return proc


def make_values(tmp_path: Path) -> Path:
    content = """# latency samples (ms)
9 3 7
1, 8
2
5
"""
    p = tmp_path / "values.txt"
    p.write_text(content, encoding="utf-8")
    return p


def test_select_prints_order_statistic(tmp_path):
    values = make_values(tmp_path)
    proc = run_cli(["select", str(values), "--k", "3"])
    assert proc.returncode == 0, proc.stderr
    assert float(proc.stdout.strip()) == 5.0


def test_select_from_stdin_with_random_pivoting():
    proc = run_cli(["select", "-", "--k", "0", "--pivoting", "random", "--seed", "1"], stdin="4 2 8 6\n")
    assert proc.returncode == 0, proc.stderr
    assert float(proc.stdout.strip()) == 2.0


def test_select_out_of_range_k(tmp_path):
    values = make_values(tmp_path)
    proc = run_cli(["select", str(values), "--k", "7"])
    assert proc.returncode == 2
    assert "[kthselect]" in proc.stderr
    assert "out of range" in proc.stderr


def test_missing_file_and_malformed_input(tmp_path):
    proc = run_cli(["select", str(tmp_path / "nope.txt"), "--k", "0"])
    assert proc.returncode == 2
    assert "not found" in proc.stderr
    bad = tmp_path / "bad.txt"
    bad.write_text("1 2\nthree\n", encoding="utf-8")
    proc = run_cli(["percentile", str(bad)])
    assert proc.returncode == 2
    assert "line 2" in proc.stderr


def test_percentile_plain_output(tmp_path):
    values = make_values(tmp_path)
    proc = run_cli(["percentile", str(values), "--p", "0", "50", "100", "--no-color"])
    assert proc.returncode == 0, proc.stderr
    lines = [ln.split("\t") for ln in proc.stdout.strip().splitlines()]
    assert [ln[0] for ln in lines] == ["p0", "p50", "p100"]
    assert [float(ln[1]) for ln in lines] == [1.0, 5.0, 9.0]


def test_percentile_json_output(tmp_path):
    values = tmp_path / "many.txt"
    values.write_text("\n".join(str(i) for i in range(1, 101)), encoding="utf-8")
    json_out = tmp_path / "pct.json"
    proc = run_cli(["percentile", str(values), "--p", "50", "90", "--method", "lower", "--json", str(json_out)])
    assert proc.returncode == 0, proc.stderr
    data = json.loads(json_out.read_text(encoding="utf-8"))
    assert data["n"] == 100
    assert data["method"] == "lower"
    assert data["estimates"] == {"50": 50.0, "90": 90.0}
    assert data["cache_hits"] >= 1


def test_percentile_rejects_out_of_range(tmp_path):
    values = make_values(tmp_path)
    proc = run_cli(["percentile", str(values), "--p", "120"])
    assert proc.returncode == 2
    assert "[0, 100]" in proc.stderr


def test_version_subcommand():
    proc = run_cli(["version"])  # returns kthselect X.Y.Z
    assert proc.returncode == 0
    assert proc.stdout.lower().startswith("kthselect ")


def test_no_subcommand_prints_help():
    proc = run_cli([])
    assert proc.returncode == 0
    assert "usage" in proc.stdout.lower()


def test_select_omits_nan_by_default(tmp_path):
    values = tmp_path / "with_nan.txt"
    values.write_text("nan 3 1 2\n", encoding="utf-8")
    proc = run_cli(["select", str(values), "--k", "0"])
    assert proc.returncode == 0, proc.stderr
    assert float(proc.stdout.strip()) == 1.0


def test_select_nan_policy_raise(tmp_path):
    values = tmp_path / "with_nan.txt"
    values.write_text("nan 3 1 2\n", encoding="utf-8")
    proc = run_cli(["select", str(values), "--k", "0", "--nan-policy", "raise"])
    assert proc.returncode == 2
    assert "[kthselect] input contains 1 NaN value(s)" in proc.stderr


def test_bench_rejects_non_positive_queries():
    proc = run_cli(["bench", "--size", "100", "--queries", "-2"])
    assert proc.returncode == 2
    assert "--queries must be >= 1" in proc.stderr
