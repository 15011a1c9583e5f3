"""Territory-estimation collaborator: HTTP client, ownership thresholding and command channel."""

from hybridgo_service.estimation.channel import EstimationChannel
from hybridgo_service.estimation.client import EstimationClient
from hybridgo_service.estimation.client import EstimationError
from hybridgo_service.estimation.client import FALLBACK_ESTIMATE
from hybridgo_service.estimation.client import TerritoryEstimate
from hybridgo_service.estimation.client import parse_estimate
from hybridgo_service.estimation.ownership import count_ownership

__all__ = [
    "EstimationChannel",
    "EstimationClient",
    "EstimationError",
    "FALLBACK_ESTIMATE",
    "TerritoryEstimate",
    "count_ownership",
    "parse_estimate",
]
