#!/usr/bin/env python3
"""
Refresh status tracker for monitoring playlist sources and cache refreshes
"""

from datetime import datetime
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict


@dataclass
class SourceStatus:
    """Fetch history for a single playlist source"""
    url: str
    last_attempt: Optional[datetime] = None
    last_success: Optional[datetime] = None
    last_failure: Optional[datetime] = None
    total_attempts: int = 0
    total_successes: int = 0
    total_failures: int = 0
    last_entry_count: int = 0
    last_error: Optional[str] = None


@dataclass
class RefreshStatus:
    """Outcome history for whole-cache refreshes"""
    last_refresh: Optional[datetime] = None
    last_success: Optional[datetime] = None
    last_failure: Optional[datetime] = None
    total_refreshes: int = 0
    total_failures: int = 0
    last_duration: Optional[float] = None  # seconds
    last_entry_count: int = 0
    last_error: Optional[str] = None


class StatusTracker:
    """Tracks per-source fetch results and refresh outcomes for one cache"""

    def __init__(self):
        self.start_time = datetime.now()
        self.sources: Dict[str, SourceStatus] = {}
        self.refresh = RefreshStatus()

    def source_fetched(self, url: str, success: bool, entry_count: int = 0, error: str = None):
        """Record the result of fetching one source"""
        if url not in self.sources:
            self.sources[url] = SourceStatus(url=url)

        status = self.sources[url]
        now = datetime.now()
        status.last_attempt = now
        status.total_attempts += 1

        if success:
            status.last_success = now
            status.total_successes += 1
            status.last_entry_count = entry_count
            status.last_error = None
        else:
            status.last_failure = now
            status.total_failures += 1
            status.last_error = error

    def refresh_completed(self, success: bool, duration: float, entry_count: int = 0, error: str = None):
        """Record the outcome of a whole refresh"""
        now = datetime.now()
        self.refresh.last_refresh = now
        self.refresh.total_refreshes += 1
        self.refresh.last_duration = duration

        if success:
            self.refresh.last_success = now
            self.refresh.last_entry_count = entry_count
            self.refresh.last_error = None
        else:
            self.refresh.last_failure = now
            self.refresh.total_failures += 1
            self.refresh.last_error = error

    def forget_source(self, url: str):
        """Drop history for a source that was removed"""
        self.sources.pop(url, None)

    def get_status(self) -> Dict[str, Any]:
        """Get comprehensive status information"""
        now = datetime.now()
        uptime = now - self.start_time

        return {
            "timestamp": now.isoformat(),
            "start_time": self.start_time.isoformat(),
            "uptime_seconds": uptime.total_seconds(),
            "uptime_human": self._format_duration(uptime.total_seconds()),
            "refresh": self._serialize(self.refresh),
            "sources": {url: self._serialize(status) for url, status in self.sources.items()},
        }

    def get_health_status(self) -> Dict[str, Any]:
        """Get basic health check information"""
        health_issues = []
        for url, status in self.sources.items():
            if status.last_failure and status.last_success:
                if status.last_failure > status.last_success:
                    health_issues.append(f"{url}: last fetch failed")
            elif status.last_failure and not status.last_success:
                health_issues.append(f"{url}: never fetched successfully")

        return {
            "status": "healthy" if not health_issues else "degraded",
            "timestamp": datetime.now().isoformat(),
            "service": "vodarr",
            "issues": health_issues if health_issues else None
        }

    @staticmethod
    def _serialize(status) -> Dict[str, Any]:
        data = asdict(status)
        # Convert datetime objects to ISO strings
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
        return data

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format"""
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            return f"{seconds/60:.1f}m"
        elif seconds < 86400:
            return f"{seconds/3600:.1f}h"
        else:
            return f"{seconds/86400:.1f}d"
