# src/domain/repositories/alert_repository.py
from __future__ import annotations
from typing import Protocol, Iterable, Optional, List
from datetime import datetime
from src.domain.entities.alert import Alert

class IAlertRepository(Protocol):
    """
    Contrato de repositório para alertas já emitidos.
    O motor de regras apenas emite; quem resolve ou apaga alertas são os
    consumidores (painel, operadores) através deste contrato.
    """

    def save(self, alert: Alert) -> None:
        """Persiste um alerta recém emitido."""
        ...

    def get(self, alert_id: str) -> Optional[Alert]:
        """Retorna o alerta pelo id (ou None)."""
        ...

    def list_recent(self, limit: int = 100) -> List[Alert]:
        """Alertas mais recentes primeiro."""
        ...

    def list_open_by_tank(self, tank_id: str) -> Iterable[Alert]:
        """Alertas ainda não resolvidos do tanque, na ordem de emissão."""
        ...

    def resolve(self, alert_id: str, when: Optional[datetime] = None) -> bool:
        """Marca como resolvido. Retorna False se o id não existir."""
        ...

    def delete(self, alert_id: str) -> bool:
        """Remove o alerta. Retorna False se o id não existir."""
        ...
