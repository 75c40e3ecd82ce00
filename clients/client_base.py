#!/usr/bin/env python3
"""
Base Client Class for Source Clients
Owns the aiohttp session lifecycle shared by every client
"""

import aiohttp
import logging
from typing import Dict, Any


class BaseSourceClient:
    """Base class for HTTP source clients with session management"""
    
    def __init__(self, client_name: str, headers: Dict[str, str] = None):
        self.client_name = client_name
        self.logger = logging.getLogger(f'vodarr.{client_name}')
        
        self.session = None
        self.request_count = 0
        
        # Default headers
        self.headers = headers or {}
    
    async def __aenter__(self):
        """Async context manager entry"""
        self._ensure_session()
        return self
        
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
    
    def _ensure_session(self) -> aiohttp.ClientSession:
        """Create the session lazily so the client can be built outside a loop"""
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers)
        return self.session
    
    def get_stats(self) -> Dict[str, Any]:
        """Get basic client usage statistics"""
        return {
            'client_name': self.client_name,
            'total_requests_made': self.request_count,
            'session_open': bool(self.session and not self.session.closed)
        }
    
    async def close(self):
        """Close the HTTP session"""
        if self.session:
            await self.session.close()
            self.session = None
