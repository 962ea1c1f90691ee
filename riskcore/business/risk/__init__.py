"""Risk engine: aggregates engine calculations into snapshots."""

from riskcore.business.risk.engine import RiskEngine, calc_risk_score
from riskcore.business.risk.models import OpenPosition, PositionRisk, RiskSnapshot

__all__ = [
    "RiskEngine",
    "calc_risk_score",
    "OpenPosition",
    "PositionRisk",
    "RiskSnapshot",
]
