"""Fuzz testing infrastructure for depgraph.

This package contains:
- test_graph_oracle: State machine fuzzer comparing the analysis pipeline
  against a brute-force reachability oracle

Python 3.13+.
"""
