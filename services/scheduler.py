#!/usr/bin/env python3
"""
Background refresh service
Keeps the playlist cache warm by forcing a refresh on a fixed interval
"""

import asyncio
import logging
from typing import Optional


class RefreshScheduler:
    """Background task that periodically refreshes the catalog"""

    def __init__(self, catalog, interval_seconds: float = 600):
        self.logger = logging.getLogger('vodarr.scheduler')
        self.catalog = catalog
        self.interval_seconds = interval_seconds
        self.running = False
        self.refresh_count = 0
        self._task: Optional[asyncio.Task] = None

    async def start(self):
        """Start the background refresh loop"""
        if self.running:
            self.logger.warning("Refresh scheduler is already running")
            return

        self.running = True
        self.logger.info(f"Starting refresh scheduler (every {self.interval_seconds}s)")
        self._task = asyncio.create_task(self._refresh_loop())

    async def stop(self):
        """Stop the background refresh loop"""
        if not self.running:
            return

        self.running = False
        self.logger.info("Stopping refresh scheduler")

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _refresh_loop(self):
        """Main loop; errors are logged and the loop carries on"""
        while self.running:
            try:
                snapshot = await self.catalog.force_refresh()
                self.refresh_count += 1
                self.logger.debug(f"Scheduled refresh done: {len(snapshot.entries)} entries")
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break
            except Exception as e:
                self.logger.error(f"Refresh loop error: {e}")
                await asyncio.sleep(self.interval_seconds)
