"""
Braintrader

Trading journal backend: records trades, computes profit and statistics,
and pushes live journal state to connected dashboards.
"""

__version__ = "0.1.0"
