"""
Sync Layer - Polling and Deduplication

Mirrors remote conversation state into local views without redundant updates.
"""

from troubleshooting_flows.sync.poller import (
    PollingMirror,
    SignatureGate,
    message_signature,
)

__all__ = [
    "PollingMirror",
    "SignatureGate",
    "message_signature",
]
