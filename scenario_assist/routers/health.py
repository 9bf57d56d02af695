"""Health check endpoints."""

import logging
from datetime import datetime
from fastapi import APIRouter

from scenario_assist import __version__
from scenario_assist.services.flow_inference import get_flow_pattern_table
from scenario_assist.utils.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "service": "scenario-assist-api",
        "version": __version__
    }


@router.get("/health/live")
async def liveness_check():
    """Liveness probe."""
    return {
        "alive": True,
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }


@router.get("/health/config")
async def config_check():
    """Show non-sensitive configuration."""
    table = get_flow_pattern_table()
    return {
        "environment": settings.ENVIRONMENT,
        "agent_url": settings.AGENT_URL,
        "agent_timeout_ms": settings.AGENT_TIMEOUT_MS,
        "flow_patterns_file": settings.FLOW_PATTERNS_FILE,
        "flow_labels": [signal.label for signal in table.signals],
        "log_format": settings.LOG_FORMAT
    }
