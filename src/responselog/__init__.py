"""HTTP response logging middleware and latency summary tooling"""

__version__ = "1.0.0"
