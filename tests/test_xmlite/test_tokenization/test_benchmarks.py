"""Tests for parse benchmarking.

The benchmark suite is exercised on tiny generated documents; psutil is
patched where exact memory figures matter.
"""

from unittest.mock import Mock, patch

import pytest

from xmlite.api import parse
from xmlite.tokenization.benchmarks import (
    ELEMENT_TREE,
    XMLITE,
    BenchmarkResult,
    BenchmarkSuite,
    ParseBenchmark,
    generate_document,
)


def make_result(parser_name="xmlite", time_ms=100.0, memory=1.0, success=True):
    return BenchmarkResult(
        parser_name=parser_name,
        test_case="case",
        processing_time_ms=time_ms,
        memory_used_mb=memory,
        characters_processed=1000,
        nodes_built=10,
        success=success,
    )


class TestBenchmarkResult:
    """Test benchmark result data structure."""

    def test_characters_per_second(self):
        """Test throughput calculation."""
        # 1000 chars / 0.1 seconds
        assert make_result(time_ms=100.0).characters_per_second == 10000.0

    def test_zero_time(self):
        """Test zero processing time does not divide by zero."""
        assert make_result(time_ms=0.0).characters_per_second == 0.0


class TestBenchmarkSuite:
    """Test statistics over collected results."""

    def test_statistics(self):
        """Test min/max/mean over successful runs only."""
        suite = BenchmarkSuite()
        for time_ms in (100.0, 200.0, 400.0):
            suite.add_result(make_result(time_ms=time_ms))
        suite.add_result(make_result(time_ms=1.0, success=False))

        stats = suite.get_statistics("xmlite", "processing_time_ms")
        assert stats["min"] == 100.0
        assert stats["max"] == 400.0
        assert stats["median"] == 200.0
        assert stats["count"] == 3

    def test_statistics_single_value(self):
        """Test stdev is zero for a single run."""
        suite = BenchmarkSuite(results=[make_result()])
        assert suite.get_statistics("xmlite", "memory_used_mb")["stdev"] == 0.0

    def test_statistics_unknown_parser(self):
        """Test an unknown parser yields no statistics."""
        assert BenchmarkSuite().get_statistics("other", "memory_used_mb") == {}

    def test_generate_report(self):
        """Test the report summarizes each parser."""
        suite = BenchmarkSuite(results=[
            make_result("xmlite"),
            make_result("xmlite", success=False),
            make_result("etree"),
        ])
        report = suite.generate_report()

        assert report["total_results"] == 3
        assert set(report["summary"]) == {"xmlite", "etree"}
        assert report["summary"]["xmlite"]["success_rate"] == 0.5
        assert report["summary"]["etree"]["performance"]["count"] == 1


class TestGenerateDocument:
    """Tests for generated benchmark input."""

    def test_document_parses(self):
        """Test generated documents are parsed by xmlite."""
        doc = parse(generate_document(3))

        assert doc.root.name == "catalog"
        assert len(doc.root.find_all("item")) == 3
        assert doc.root.find_all("data")[2].attr("value") == "4"
        assert not doc.has_diagnostics


class TestParseBenchmark:
    """Tests for the benchmark runner."""

    def test_invalid_run_counts(self):
        """Test run counts are validated."""
        with pytest.raises(ValueError, match="warmup_runs"):
            ParseBenchmark(warmup_runs=-1)
        with pytest.raises(ValueError, match="benchmark_runs"):
            ParseBenchmark(benchmark_runs=0)

    def test_run_benchmark(self):
        """Test a full run over a small test case."""
        benchmark = ParseBenchmark(warmup_runs=0, benchmark_runs=2)
        benchmark.test_cases = {"tiny": generate_document(5)}

        suite = benchmark.run_benchmark()

        assert len(suite.get_results_by_parser(XMLITE)) == 2
        assert len(suite.get_results_by_parser(ELEMENT_TREE)) == 2
        xmlite_result = suite.get_results_by_parser(XMLITE)[0]
        etree_result = suite.get_results_by_parser(ELEMENT_TREE)[0]
        assert xmlite_result.success
        # xmlite also counts whitespace text nodes
        assert xmlite_result.nodes_built > etree_result.nodes_built == 16

    def test_run_without_element_tree(self):
        """Test ElementTree comparison can be skipped."""
        benchmark = ParseBenchmark(warmup_runs=0, benchmark_runs=1)
        benchmark.test_cases = {"tiny": generate_document(1)}

        suite = benchmark.run_benchmark(include_element_tree=False)
        assert {r.parser_name for r in suite.results} == {XMLITE}

    def test_failed_parse_recorded(self):
        """Test parse errors are recorded as unsuccessful runs."""
        benchmark = ParseBenchmark(warmup_runs=0, benchmark_runs=1)
        benchmark.test_cases = {"broken": "<a><b></a>"}

        suite = benchmark.run_benchmark()

        assert all(not r.success for r in suite.results)
        xmlite_result = suite.get_results_by_parser(XMLITE)[0]
        assert "expected 'b', found 'a'" in xmlite_result.error_message
        assert xmlite_result.nodes_built == 0

    @patch("xmlite.tokenization.benchmarks.psutil.Process")
    def test_memory_measurement(self, mock_process):
        """Test memory is the RSS delta in megabytes."""
        mock_process.return_value.memory_info.side_effect = [
            Mock(rss=10 * 1024 * 1024),
            Mock(rss=12 * 1024 * 1024),
        ]
        benchmark = ParseBenchmark(warmup_runs=0, benchmark_runs=1)
        benchmark.test_cases = {"tiny": "<a/>"}

        suite = benchmark.run_benchmark(include_element_tree=False)
        assert suite.results[0].memory_used_mb == 2.0

    @patch("xmlite.tokenization.benchmarks.psutil.Process")
    def test_memory_never_negative(self, mock_process):
        """Test a shrinking RSS is reported as zero."""
        mock_process.return_value.memory_info.side_effect = [
            Mock(rss=12 * 1024 * 1024),
            Mock(rss=10 * 1024 * 1024),
        ]
        benchmark = ParseBenchmark(warmup_runs=0, benchmark_runs=1)
        benchmark.test_cases = {"tiny": "<a/>"}

        suite = benchmark.run_benchmark(include_element_tree=False)
        assert suite.results[0].memory_used_mb == 0.0
