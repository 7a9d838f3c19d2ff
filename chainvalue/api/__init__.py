"""
HTTP API.

aiohttp application exposing the contract value operations under /api with
a uniform {success, data, error, message} envelope.
"""

from .server import create_app, start_api_server, stop_api_server

__all__ = ["create_app", "start_api_server", "stop_api_server"]
