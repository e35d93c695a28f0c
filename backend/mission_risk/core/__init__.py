"""
Core risk-assessment package.

This package provides:
- Destination/vehicle catalog and route calculation
- Health condition catalog and health assessment
- Per-person risk scoring and mission-level aggregation
- Passenger ordering optimization
- Estimator retraining
- Mission mutation surface and event bus
"""

from . import catalog
from . import route
from . import health
from . import risk_scorer
from . import mission_aggregator
from . import optimizer
from . import trainer
from . import mission_planner
from . import statistics
from . import events

__all__ = [
    'catalog',
    'route',
    'health',
    'risk_scorer',
    'mission_aggregator',
    'optimizer',
    'trainer',
    'mission_planner',
    'statistics',
    'events',
]
