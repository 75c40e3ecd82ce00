#!/usr/bin/env python3
"""
Models Package
Immutable playlist data types shared by the parser, cache and catalog
"""

from .playlist import (
    DEFAULT_BACKGROUND_URL,
    DEFAULT_POSTER_URL,
    Entry,
    ExtinfAttributes,
    NotFound,
    RefreshCompleted,
    RefreshTrigger,
    ResolvedStream,
    Snapshot,
    SourceResult,
)

__all__ = [
    'DEFAULT_BACKGROUND_URL',
    'DEFAULT_POSTER_URL',
    'Entry',
    'ExtinfAttributes',
    'NotFound',
    'RefreshCompleted',
    'RefreshTrigger',
    'ResolvedStream',
    'Snapshot',
    'SourceResult',
]
