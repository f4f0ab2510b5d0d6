"""
Delivery Intel - DORA metrics, dependency vulnerabilities and delivery
health scoring for GitHub repositories.
"""

from delivery_intel.core import analyze, analyze_sync, compute_risk_score

__version__ = "0.1.0"

__all__ = ["analyze", "analyze_sync", "compute_risk_score", "__version__"]
