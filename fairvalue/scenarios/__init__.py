"""Valuation configuration and preset registry."""

from fairvalue.scenarios.config import ValuationConfig
from fairvalue.scenarios.registry import create_assumptions
from fairvalue.scenarios.registry import create_methods
from fairvalue.scenarios.registry import create_sector_multiples
from fairvalue.scenarios.registry import create_weights
from fairvalue.scenarios.registry import list_presets

__all__ = [
    'ValuationConfig',
    'create_assumptions',
    'create_methods',
    'create_sector_multiples',
    'create_weights',
    'list_presets',
]
