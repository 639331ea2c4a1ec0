"""
cfgcases Analysis

Classification, metrics and reporting for generated test cases.
"""

from .classifier import Category, Classifier, TestCase
from .metrics import MetricsTimer, SuiteMetrics, compute_metrics
from .report_generator import ReportGenerator

__all__ = [
    'Category', 'Classifier', 'TestCase',
    'MetricsTimer', 'SuiteMetrics', 'compute_metrics',
    'ReportGenerator',
]
