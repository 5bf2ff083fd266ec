"""Cache simulation, transpose tracing and scoring, and pipelined processor building blocks."""

__version__ = "0.1.0"