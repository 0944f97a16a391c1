"""Service modules"""
from .amount import AmountResolver

__all__ = ["AmountResolver"]
