"""
Scheduler component - scheduled draft to published transitions.
"""

from .component import PublicationTransitioner, create_transitioner, run_tick
from .models import TickResult
from .ports import PublishableRepoPort, TimePort

__all__ = [
    # Entry points
    "create_transitioner",
    "run_tick",
    "PublicationTransitioner",
    # Output models
    "TickResult",
    # Ports
    "PublishableRepoPort",
    "TimePort",
]
