"""Entities living on the timeline."""

from .intent import Intent

__all__ = ["Intent"]
