# =============================================================================
# lib/anthropic_client.py - Anthropic Client Factory
# =============================================================================
# Builds the shared Anthropic client. AI-assisted business analysis is
# optional: with no ANTHROPIC_API_KEY the factory returns None and callers
# fall back to heuristic extraction.
# =============================================================================

from __future__ import annotations

import logging
from functools import lru_cache

import anthropic

from app.config import settings

logger = logging.getLogger(__name__)


@lru_cache
def get_anthropic_client() -> anthropic.Anthropic | None:
    """
    Get or create the singleton Anthropic client.

    Returns:
        The client, or None when ANTHROPIC_API_KEY is not set
    """
    if not settings.ANTHROPIC_API_KEY:
        logger.warning("ANTHROPIC_API_KEY not configured - AI features will be disabled")
        return None

    return anthropic.Anthropic(api_key=settings.ANTHROPIC_API_KEY)
