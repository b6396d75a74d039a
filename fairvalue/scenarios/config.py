"""
Valuation configuration.

ValuationConfig is a serializable (JSON-friendly) configuration class that
names the scenario preset and weighting profile of a run, plus any explicit
overrides. Names map to factories in the registry.
"""

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
import json
from typing import Any, Optional


@dataclass
class ValuationConfig:
  """
  Configuration for a valuation run.

  Attributes:
    name: Human-readable configuration name
    scenario: Scenario preset name ('base', 'bull', 'bear')
    weights: Weighting profile name ('growth', 'mature', 'distress')
    assumption_overrides: Field overrides applied to the scenario preset
      (e.g., {'risk_free_rate': 0.13})
    weight_overrides: Per-method weight overrides keyed by lowercase
      method name (e.g., {'dcf': 0.6})
    sector_pe: Explicit sector P/E (None: peers or placeholder)
    sector_ev_ebitda: Explicit sector EV/EBITDA (None: peers or placeholder)
    use_market_inputs: Substitute observed beta and revenue growth
    use_peer_multiples: Derive sector multiples from peer quotes
  """
  name: str = 'default'
  scenario: str = 'base'
  weights: str = 'mature'
  assumption_overrides: dict[str, float] = field(default_factory=dict)
  weight_overrides: dict[str, float] = field(default_factory=dict)
  sector_pe: Optional[float] = None
  sector_ev_ebitda: Optional[float] = None
  use_market_inputs: bool = False
  use_peer_multiples: bool = False

  @classmethod
  def default(cls) -> 'ValuationConfig':
    """
    Create default configuration.

    Uses:
      - Base scenario (Rf 15%, ERP 5%, beta 1.0, g 5%)
      - Mature weighting profile
      - Placeholder sector multiples
    """
    return cls(name='default', scenario='base', weights='mature')

  @classmethod
  def bull(cls) -> 'ValuationConfig':
    """Optimistic scenario with growth weighting."""
    return cls(name='bull', scenario='bull', weights='growth')

  @classmethod
  def bear(cls) -> 'ValuationConfig':
    """Pessimistic scenario with distress weighting."""
    return cls(name='bear', scenario='bear', weights='distress')

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'ValuationConfig':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'ValuationConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))
