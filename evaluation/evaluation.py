#!/usr/bin/env python3
"""
Evaluation runner for huffpack.

This evaluation script:
- Runs the pytest suite in tests/ and collects per-test outcomes
- Compresses a built-in sample corpus and records sizes and ratios
- Writes a JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [--output report.json] [--skip-tests]
"""
import argparse
import json
import os
import platform
import random
import subprocess
import sys
import time
import uuid
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from huffman_service import HuffmanService  # noqa: E402


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch information."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    queries = {
        "git_commit": ["git", "rev-parse", "HEAD"],
        "git_branch": ["git", "rev-parse", "--abbrev-ref", "HEAD"],
    }
    for key, cmd in queries.items():
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, cwd=str(PROJECT_ROOT), timeout=5)
        except (OSError, subprocess.SubprocessError):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value
    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "architecture": platform.machine(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def parse_pytest_verbose_output(output):
    """Parse pytest verbose output to extract test results."""
    tests = []
    statuses = {" PASSED": "passed", " FAILED": "failed", " ERROR": "error", " SKIPPED": "skipped"}

    for line in output.splitlines():
        line_stripped = line.strip()

        # Match lines like: tests/test_service.py::test_roundtrip_scenario PASSED [ 10%]
        if "::" not in line_stripped:
            continue
        for status_word, outcome in statuses.items():
            if status_word in line_stripped:
                nodeid = line_stripped.split(status_word)[0].strip()
                tests.append({
                    "nodeid": nodeid,
                    "name": nodeid.split("::")[-1],
                    "outcome": outcome,
                })
                break

    return tests


def summarize_tests(tests):
    summary = {"total": len(tests)}
    for outcome in ("passed", "failed", "error", "skipped"):
        summary[outcome] = sum(1 for t in tests if t.get("outcome") == outcome)
    return summary


def run_pytest(tests_dir, timeout=600):
    """
    Run pytest on the tests/ folder in a subprocess.

    Returns:
        dict with test results
    """
    print(f"\n{'=' * 60}")
    print("RUNNING TESTS")
    print(f"{'=' * 60}")
    print(f"Tests directory: {tests_dir}")

    cmd = [sys.executable, "-m", "pytest", str(tests_dir), "-v", "--tb=short"]
    env = os.environ.copy()
    env["PYTHONPATH"] = str(PROJECT_ROOT)

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            env=env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        print("Test execution timed out")
        return {"success": False, "exit_code": -1, "tests": [], "summary": {"error": "timeout"}, "stdout": "", "stderr": ""}

    tests = parse_pytest_verbose_output(result.stdout)
    summary = summarize_tests(tests)
    print(
        f"\nResults: {summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['error']} errors, {summary['skipped']} skipped (total: {summary['total']})"
    )

    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summary,
        "stdout": result.stdout[-3000:],
        "stderr": result.stderr[-1000:],
    }


def sample_corpus(seed=1234):
    """Named byte strings covering typical and degenerate inputs."""
    rng = random.Random(seed)
    text = (b"2024-01-01 12:00:00 INFO request handled in 12ms path=/api/items status=200\n" * 200)
    skewed = bytes(rng.choices(range(8), weights=[64, 32, 16, 8, 4, 2, 1, 1], k=20000))
    return {
        "log_lines": text,
        "skewed_8_symbols": skewed,
        "uniform_random": bytes(rng.getrandbits(8) for _ in range(20000)),
        "all_byte_values": bytes(range(256)) * 4,
        "single_symbol": b"A" * 5000,
    }


def measure_compression(corpus, container="native"):
    """Round-trip every sample through HuffmanService and record sizes."""
    service = HuffmanService(container=container)
    results = []
    for name, data in corpus.items():
        t0 = time.perf_counter()
        blob = service.compress(data)
        t1 = time.perf_counter()
        restored = service.decompress(blob)
        t2 = time.perf_counter()
        results.append({
            "name": name,
            "original_size": len(data),
            "compressed_size": len(blob),
            "ratio": round(len(blob) / len(data), 4),
            "roundtrip_ok": restored == data,
            "compress_seconds": round(t1 - t0, 6),
            "decompress_seconds": round(t2 - t1, 6),
        })
    return results


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    output_dir = PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / "report.json"


def main(argv=None):
    """Main entry point for evaluation."""
    parser = argparse.ArgumentParser(description="Run the huffpack evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)",
    )
    parser.add_argument("--skip-tests", action="store_true", help="only run the compression benchmark")
    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()
    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    tests = None
    if not args.skip_tests:
        tests = run_pytest(PROJECT_ROOT / "tests")

    benchmark = measure_compression(sample_corpus())
    print(f"\n{'=' * 60}")
    print("COMPRESSION BENCHMARK")
    print(f"{'=' * 60}")
    for row in benchmark:
        status = "ok" if row["roundtrip_ok"] else "MISMATCH"
        print(f"  {row['name']:<18} {row['original_size']:>7} -> {row['compressed_size']:>7}  ratio {row['ratio']:.3f}  {status}")

    success = all(row["roundtrip_ok"] for row in benchmark) and (tests is None or tests["success"])

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()
    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "environment": get_environment_info(),
        "tests": tests,
        "benchmark": benchmark,
    }

    output_path = Path(args.output) if args.output else generate_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)

    print(f"\nReport saved to: {output_path}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'YES' if success else 'NO'}")
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
