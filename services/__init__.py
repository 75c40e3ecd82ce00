#!/usr/bin/env python3
"""
Services Package
Source management, aggregation, catalog queries and background refresh
"""
