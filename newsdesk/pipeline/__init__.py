"""Fetch and rewrite pipeline stages."""

from .dedup import Deduplicator
from .factory import build_fetch_orchestrator, build_image_resolver, build_rewrite_stage, build_store
from .orchestrator import FetchOrchestrator, FetchReport, print_fetch_report
from .queue import PendingQueue, StorePendingQueue
from .rewrite import ProcessResult, RewriteStage

__all__ = [
    "Deduplicator",
    "FetchOrchestrator",
    "FetchReport",
    "PendingQueue",
    "ProcessResult",
    "RewriteStage",
    "StorePendingQueue",
    "build_fetch_orchestrator",
    "build_image_resolver",
    "build_rewrite_stage",
    "build_store",
    "print_fetch_report",
]
