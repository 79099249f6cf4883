"""Upstream network-controller API adapter."""
from .client import UnifiApi

__all__ = ["UnifiApi"]
