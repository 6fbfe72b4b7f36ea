"""
Services: transport, envelope decoding and the SDP operation client
"""
from sdp_bridge.services.list_params import ListParams
from sdp_bridge.services.retry import RetryDecision, RetryPolicy
from sdp_bridge.services.sdp_client import SdpClient
from sdp_bridge.services.transport import RawResponse, Transport

__all__ = [
    "ListParams",
    "RetryDecision",
    "RetryPolicy",
    "SdpClient",
    "RawResponse",
    "Transport",
]
