# define como o motor de alertas guarda o último disparo de cada regra
# mas nao onde (memória, redis, etc.)
# src/domain/repositories/cooldown_repository.py
from __future__ import annotations
from typing import Protocol
from datetime import datetime

class IAlertCooldownRepository(Protocol):
    """Último instante de emissão por instância de regra (tanque, tipo, severidade)."""

    def is_cooling_down(self, key: str, now: datetime) -> bool:
        """True se a chave foi emitida dentro da janela de cooldown."""
        ...

    def mark(self, key: str, now: datetime) -> None:
        """Registra a emissão da chave no instante informado."""
        ...

    def sweep(self, now: datetime) -> int:
        """Remove entradas expiradas. Retorna quantas foram removidas."""
        ...

    def clear(self) -> None:
        ...
