"""
Capture module for WebMap Harvester.

Provides request classification and browser-based page capture using Pyppeteer.
"""

from .collector import (
    CollectedMetadata,
    MetadataCollector,
    RequestClassifier,
    RequestType,
    extract_access_token,
)

__all__ = [
    'CollectedMetadata',
    'MetadataCollector',
    'RequestClassifier',
    'RequestType',
    'extract_access_token',
]
