"""Business layer configuration."""

from riskcore.business.config.risk_config import RiskSettings

__all__ = ["RiskSettings"]
