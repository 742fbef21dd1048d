"""Parse throughput benchmarking.

Runs the full lexer, tag assembler and tree builder pipeline over generated
documents of increasing size and, for comparison, the standard library's
``xml.etree.ElementTree``. Memory is measured as the process RSS delta.
"""

import gc
import statistics
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import psutil

from xmlite.shared import ParseError, ParserConfig, get_logger

XMLITE = "xmlite"
ELEMENT_TREE = "xml.etree.ElementTree"


@dataclass
class BenchmarkResult:
    """Result of a single benchmark run."""

    parser_name: str
    test_case: str
    processing_time_ms: float
    memory_used_mb: float
    characters_processed: int
    nodes_built: int
    success: bool
    error_message: Optional[str] = None

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms


@dataclass
class BenchmarkSuite:
    """Collection of benchmark results with statistical analysis."""

    results: List[BenchmarkResult] = field(default_factory=list)
    suite_name: str = "Parse Benchmark"
    timestamp: float = field(default_factory=time.time)

    def add_result(self, result: BenchmarkResult) -> None:
        self.results.append(result)

    def get_results_by_parser(self, parser_name: str) -> List[BenchmarkResult]:
        return [r for r in self.results if r.parser_name == parser_name]

    def get_statistics(self, parser_name: str, metric: str) -> Dict[str, float]:
        """Min/max/mean/median/stdev of ``metric`` over successful runs."""
        values = [
            getattr(r, metric)
            for r in self.get_results_by_parser(parser_name)
            if r.success
        ]
        if not values:
            return {}
        return {
            "min": min(values),
            "max": max(values),
            "mean": statistics.mean(values),
            "median": statistics.median(values),
            "stdev": statistics.stdev(values) if len(values) > 1 else 0.0,
            "count": len(values),
        }

    def generate_report(self) -> Dict[str, Any]:
        """Summarize success rate, throughput and memory per parser."""
        parsers = sorted({r.parser_name for r in self.results})
        report: Dict[str, Any] = {
            "suite_name": self.suite_name,
            "timestamp": self.timestamp,
            "total_results": len(self.results),
            "summary": {},
        }
        for parser in parsers:
            parser_results = self.get_results_by_parser(parser)
            successful = [r for r in parser_results if r.success]
            report["summary"][parser] = {
                "total_runs": len(parser_results),
                "successful_runs": len(successful),
                "success_rate": len(successful) / len(parser_results),
                "performance": self.get_statistics(parser, "characters_per_second"),
                "memory": self.get_statistics(parser, "memory_used_mb"),
            }
        return report


def generate_document(items: int) -> str:
    """Generate a well-formed document with ``items`` repeated records."""
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', "<catalog>"]
    for i in range(items):
        parts.append(
            f'  <item id="{i}" priority="{i % 10}">\n'
            f"    <title>Item {i}</title>\n"
            f"    <!-- generated -->\n"
            f'    <data value="{i * 2}"/>\n'
            f"  </item>"
        )
    parts.append("</catalog>")
    return "\n".join(parts)


class ParseBenchmark:
    """Times xmlite against ElementTree on generated documents."""

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        warmup_runs: int = 1,
        benchmark_runs: int = 5
    ) -> None:
        """Initialize benchmark.

        Args:
            config: Parser configuration used for xmlite runs
            warmup_runs: Number of warmup runs before benchmarking
            benchmark_runs: Number of measured runs per parser and test case
        """
        if warmup_runs < 0:
            raise ValueError("warmup_runs must be >= 0")
        if benchmark_runs <= 0:
            raise ValueError("benchmark_runs must be > 0")
        self.config = config or ParserConfig(warn_on_recovery=False)
        self.warmup_runs = warmup_runs
        self.benchmark_runs = benchmark_runs
        self.logger = get_logger(__name__, self.config.correlation_id, "benchmark")
        self.test_cases: Dict[str, str] = {
            "small": generate_document(10),
            "medium": generate_document(500),
            "large": generate_document(5000),
        }

    @staticmethod
    def _memory_mb() -> float:
        return psutil.Process().memory_info().rss / 1024 / 1024

    def _run_xmlite(self, xml_content: str) -> int:
        from xmlite.api import parse

        return sum(1 for _ in parse(xml_content, self.config).iter())

    @staticmethod
    def _run_element_tree(xml_content: str) -> int:
        return sum(1 for _ in ET.fromstring(xml_content).iter())

    def _measure(
        self,
        parser_name: str,
        test_case: str,
        xml_content: str,
        run: Callable[[str], int]
    ) -> BenchmarkResult:
        gc.collect()
        memory_before = self._memory_mb()
        start_time = time.perf_counter()
        try:
            nodes = run(xml_content)
            success, error_message = True, None
        except (ParseError, ET.ParseError) as e:
            nodes, success, error_message = 0, False, str(e)
        processing_time = (time.perf_counter() - start_time) * 1000
        memory_used = max(0.0, self._memory_mb() - memory_before)

        return BenchmarkResult(
            parser_name=parser_name,
            test_case=test_case,
            processing_time_ms=processing_time,
            memory_used_mb=memory_used,
            characters_processed=len(xml_content),
            nodes_built=nodes,
            success=success,
            error_message=error_message,
        )

    def run_benchmark(self, include_element_tree: bool = True) -> BenchmarkSuite:
        """Run every test case through each parser.

        Args:
            include_element_tree: Whether to include ElementTree for comparison

        Returns:
            BenchmarkSuite with one result per measured run
        """
        parsers: Dict[str, Callable[[str], int]] = {XMLITE: self._run_xmlite}
        if include_element_tree:
            parsers[ELEMENT_TREE] = self._run_element_tree

        suite = BenchmarkSuite()
        self.logger.info(
            "Starting benchmark suite",
            extra={"test_cases": len(self.test_cases), "parsers": list(parsers)}
        )
        for test_case, xml_content in self.test_cases.items():
            for parser_name, run in parsers.items():
                for _ in range(self.warmup_runs):
                    self._measure(parser_name, test_case, xml_content, run)
                for _ in range(self.benchmark_runs):
                    suite.add_result(
                        self._measure(parser_name, test_case, xml_content, run)
                    )

        self.logger.info(
            "Benchmark suite completed",
            extra={"total_results": len(suite.results)}
        )
        return suite
