"""Conversion services: pipeline, selection, rendering, worker bridge, session, run orchestration."""

from .pipeline import build_dataset, load_dataset, output_filename
from .projection import render
from .selection import ColumnSelector
from .session import ConverterSession
from .worker import ParseRequest, ParseResponse, WorkerBridge, handle_request

__all__ = [
    "build_dataset",
    "load_dataset",
    "output_filename",
    "render",
    "ColumnSelector",
    "ConverterSession",
    "ParseRequest",
    "ParseResponse",
    "WorkerBridge",
    "handle_request",
]
