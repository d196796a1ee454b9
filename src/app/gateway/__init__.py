"""Core do gateway: autenticação, admissão, idempotência e dispatch."""

from app.gateway.admission import (
    AdmissionController,
    AdmissionSnapshot,
    AdmissionTicket,
    TicketAlreadyReleasedError,
)
from app.gateway.dispatcher import Dispatcher, DispatchOutcome
from app.gateway.envelope import Envelope, EnvelopeModel, parse_envelope
from app.gateway.idempotency import IdempotencyCache, idempotency_key, input_fingerprint
from app.gateway.registry import DuplicateHandlerError, HandlerRegistry, RegistryFrozenError
from app.gateway.signature import (
    HEADER_REQUEST_ID,
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    HEADER_USER_ID,
    SignatureGate,
    VerifiedCaller,
    canonical_message,
    verify_request_signature,
)

__all__ = [
    "HEADER_REQUEST_ID",
    "HEADER_SIGNATURE",
    "HEADER_TIMESTAMP",
    "HEADER_USER_ID",
    "AdmissionController",
    "AdmissionSnapshot",
    "AdmissionTicket",
    "DispatchOutcome",
    "Dispatcher",
    "DuplicateHandlerError",
    "Envelope",
    "EnvelopeModel",
    "HandlerRegistry",
    "IdempotencyCache",
    "RegistryFrozenError",
    "SignatureGate",
    "TicketAlreadyReleasedError",
    "VerifiedCaller",
    "canonical_message",
    "idempotency_key",
    "input_fingerprint",
    "parse_envelope",
    "verify_request_signature",
]
