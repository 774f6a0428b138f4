"""NLU service adapters."""

from intentbot.nlu.dialogflow import DialogflowClient, is_valid_client_token, parse_query_response
from intentbot.nlu.static import StaticNLU

__all__ = [
    "DialogflowClient",
    "StaticNLU",
    "is_valid_client_token",
    "parse_query_response",
]
