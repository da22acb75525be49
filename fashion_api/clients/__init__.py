"""
Clients for external services (AWS, remote image hosts).
"""

from fashion_api.clients.aws import AWSClient
from fashion_api.clients.http import ImageFetcher, filename_from_url


__all__ = [
    'AWSClient',
    'ImageFetcher',
    'filename_from_url',
]
