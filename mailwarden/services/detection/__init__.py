"""
MailWarden Detection Module

Heuristic fraud detection engine: seven independent strategies aggregated
by a weighted-maximum risk scorer.
"""

from .engine import DetectionEngine, analyze_message
from .scorer import RiskScorer
from .rules import (
    DetectionContext,
    DetectionStrategy,
    get_default_strategies,
)

__all__ = [
    # Engine
    'DetectionEngine',
    'analyze_message',

    # Scorer
    'RiskScorer',

    # Strategies
    'DetectionContext',
    'DetectionStrategy',
    'get_default_strategies',
]
