"""Tokenization layer for xmlite.

This module turns raw text into a stream of structural tags in two stages: a
state-machine lexer producing classified tokens, and a tag assembler that
groups tokens into tags with local error recovery.

Key Components:
    Lexer: Single-pass tokenizer with line/column tracking and lookahead
    Token: Classified, zero-copy span of the source text
    TagStream: Restartable tag sequence with accumulated syntax diagnostics
    ElementTag, Declaration, TextTag: Items produced by the tag stream
    ParseBenchmark, BenchmarkSuite: Throughput and memory benchmarking (benchmarks)
"""

from .assembly import (
    Declaration,
    ElementTag,
    Tag,
    TagKind,
    TagStream,
    TextTag,
)
from .benchmarks import (
    BenchmarkResult,
    BenchmarkSuite,
    ParseBenchmark,
)
from .lexer import (
    Lexer,
    LexerState,
    Position,
    Token,
    TokenKind,
)

__all__ = [
    "BenchmarkResult",
    "BenchmarkSuite",
    "Declaration",
    "ElementTag",
    "Lexer",
    "LexerState",
    "ParseBenchmark",
    "Position",
    "Tag",
    "TagKind",
    "TagStream",
    "TextTag",
    "Token",
    "TokenKind",
]
