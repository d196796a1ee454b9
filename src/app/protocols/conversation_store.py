"""Protocolos do store remoto de conversas e do cliente de diálogo.

O store remoto é dono das sessões de conversa; o gateway não mantém
cópia local além do tempo de vida de uma requisição.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class RemoteConversation:
    """Sessão de conversa como existe no store remoto.

    Attributes:
        conversation_id: ID opaco e único
        metadata: Metadados string->string (language, turn)
    """

    conversation_id: str
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def turn(self) -> int:
        """Turno atual (0 quando ausente ou inválido)."""
        try:
            return max(int(self.metadata.get("turn", "0")), 0)
        except ValueError:
            return 0

    @property
    def language(self) -> str:
        return self.metadata.get("language", "")


@dataclass(frozen=True, slots=True)
class DialogueTurn:
    """Entrada de uma troca com o modelo de linguagem."""

    language: str
    question: str
    summaries: str | None = None


class ConversationStoreProtocol(ABC):
    """Contrato das quatro operações do store remoto de conversas.

    fetch/update/delete de ID inexistente (ou já removido) levantam
    ConversationNotFoundError; demais falhas levantam UpstreamError.
    """

    @abstractmethod
    async def create(self, metadata: dict[str, str]) -> RemoteConversation: ...

    @abstractmethod
    async def fetch(self, conversation_id: str) -> RemoteConversation: ...

    @abstractmethod
    async def update(self, conversation_id: str, metadata: dict[str, str]) -> None: ...

    @abstractmethod
    async def delete(self, conversation_id: str) -> None: ...


class DialogueClientProtocol(ABC):
    """Contrato do modelo de linguagem para trocas em uma conversa."""

    @abstractmethod
    async def start(self, conversation_id: str, turn: DialogueTurn) -> str:
        """Primeira troca (com prompt inicial e resumos obrigatórios)."""

    @abstractmethod
    async def reply(self, conversation_id: str, turn: DialogueTurn) -> str:
        """Troca subsequente (resumos adicionais opcionais)."""
