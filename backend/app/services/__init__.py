"""Services for BinDay Operations."""

from app.services.storage import ProofStorageService, get_storage_service
from app.services.job_generation import JobGenerationService
from app.services.job_status import JobProgressService
from app.services.proof_photos import ProofPreferenceService
from app.services.request_forwarder import RequestForwarder, get_request_forwarder
from app.services.route_optimizer import RouteOptimizer, get_route_optimizer

__all__ = [
    "ProofStorageService",
    "get_storage_service",
    "JobGenerationService",
    "JobProgressService",
    "ProofPreferenceService",
    "RequestForwarder",
    "get_request_forwarder",
    "RouteOptimizer",
    "get_route_optimizer",
]
