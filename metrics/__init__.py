"""
Metrics and Reporting Module
"""
from .collector import MetricsCollector

__all__ = ['MetricsCollector']
