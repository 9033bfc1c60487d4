"""
MassBan - Lists Service Package
===============================

Remote list download, progress files and reconciliation.
"""

from .fetcher import FetchResponse, HttpListFetcher, ListFetcher
from .progress import ProgressFile
from .reconciler import ReconcileResult, difference, reconcile, sanitize, split_list

__all__ = [
    "FetchResponse",
    "HttpListFetcher",
    "ListFetcher",
    "ProgressFile",
    "ReconcileResult",
    "difference",
    "reconcile",
    "sanitize",
    "split_list",
]
