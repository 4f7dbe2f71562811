"""Orchestrator package - coordinates attachment uploads."""
from .bridge import CompletionBridge
from .core import AttachmentsUploader

__all__ = ["AttachmentsUploader", "CompletionBridge"]
