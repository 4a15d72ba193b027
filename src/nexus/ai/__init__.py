"""Generative-text collaborator."""

from nexus.ai.client import AIMode, GenerationRequest, GenerativeClient

__all__ = ["AIMode", "GenerationRequest", "GenerativeClient"]
