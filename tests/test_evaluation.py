import importlib.util
import json
import os

import pytest

EVALUATION_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'evaluation', 'evaluation.py'))


@pytest.fixture(scope="module")
def evaluation():
	spec = importlib.util.spec_from_file_location("huffpack_evaluation", EVALUATION_PATH)
	module = importlib.util.module_from_spec(spec)
	spec.loader.exec_module(module)
	return module


def test_parse_pytest_verbose_output(evaluation):
	output = "\n".join([
		"tests/test_core.py::test_count_frequencies PASSED                [ 10%]",
		"tests/test_core.py::test_other FAILED                            [ 20%]",
		"tests/test_cli.py::test_skip SKIPPED (reason)                    [ 30%]",
		"collected 3 items",
	])
	tests = evaluation.parse_pytest_verbose_output(output)
	assert [t["outcome"] for t in tests] == ["passed", "failed", "skipped"]
	assert tests[0]["name"] == "test_count_frequencies"
	assert evaluation.summarize_tests(tests) == {
		"total": 3, "passed": 1, "failed": 1, "error": 0, "skipped": 1,
	}


def test_measure_compression_roundtrips(evaluation):
	corpus = {"text": b"abcabcabd" * 50, "single": b"z" * 100}
	rows = evaluation.measure_compression(corpus)
	assert [row["name"] for row in rows] == ["text", "single"]
	assert all(row["roundtrip_ok"] for row in rows)
	assert rows[0]["original_size"] == 450


def test_sample_corpus_is_deterministic(evaluation):
	assert evaluation.sample_corpus() == evaluation.sample_corpus()


def test_main_skip_tests_writes_report(evaluation, tmp_path):
	report_path = tmp_path / "report.json"
	assert evaluation.main(["--skip-tests", "--output", str(report_path)]) == 0
	report = json.loads(report_path.read_text())
	assert report["success"] is True
	assert report["tests"] is None
	assert {row["name"] for row in report["benchmark"]} == set(evaluation.sample_corpus())
