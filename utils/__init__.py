#!/usr/bin/env python3
"""
Utils Package
Shared utilities for Vodarr services and clients
"""

# Import key classes for easy access
from .logger import VodarrLogger, setup_application_logging, get_logger
from .status_tracker import StatusTracker
from .http_client import HTTPClientUtils, SourceFetchError
from .playlist_parser import classify_line, extract_attributes, parse_playlist

__all__ = [
    'VodarrLogger',
    'setup_application_logging',
    'get_logger',
    'StatusTracker',
    'HTTPClientUtils',
    'SourceFetchError',
    'classify_line',
    'extract_attributes',
    'parse_playlist'
]
