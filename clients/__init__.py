#!/usr/bin/env python3
"""
Clients Package
HTTP clients for playlist sources
"""

from .client_base import BaseSourceClient
from .client_playlist import PlaylistSourceClient, TextFetcher

__all__ = [
    'BaseSourceClient',
    'PlaylistSourceClient',
    'TextFetcher'
]
