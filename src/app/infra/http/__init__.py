"""Clientes HTTP (httpx) dos serviços externos."""

from app.infra.http.auth_service_client import AuthServiceClient
from app.infra.http.conversation_store import HttpConversationStore
from app.infra.http.data_service_client import DataServiceClient

__all__ = [
    "AuthServiceClient",
    "DataServiceClient",
    "HttpConversationStore",
]
