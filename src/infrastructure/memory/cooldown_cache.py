from __future__ import annotations
from datetime import datetime, timedelta
from typing import Dict
import logging

from src.domain.repositories.cooldown_repository import IAlertCooldownRepository

log = logging.getLogger("aquamind.cooldown")


class InMemoryCooldownCache(IAlertCooldownRepository):
    """
    Cache de cooldown dos alertas: chave da regra -> último disparo.

    - vive enquanto a instância existir (a sessão do simulador)
    - expiração preguiçosa: entradas vencidas são descartadas na leitura
    - sweep() faz a limpeza ativa de tudo que já venceu
    """

    def __init__(self, ttl: timedelta = timedelta(seconds=60)) -> None:
        self.ttl = ttl
        self._last: Dict[str, datetime] = {}

    def __len__(self) -> int:
        return len(self._last)

    def is_cooling_down(self, key: str, now: datetime) -> bool:
        last = self._last.get(key)
        if last is None:
            return False
        if now - last < self.ttl:
            return True
        del self._last[key]
        return False

    def mark(self, key: str, now: datetime) -> None:
        self._last[key] = now

    def sweep(self, now: datetime) -> int:
        expired = [k for k, ts in self._last.items() if now - ts >= self.ttl]
        for k in expired:
            del self._last[k]
        if expired:
            log.debug("cooldown_sweep removed=%s", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._last.clear()
