# histórico de alertas da sessão, alimentado pelo barramento de eventos
# é aqui que o painel marca alertas como resolvidos ou os apaga
# a thread da simulação grava e a do painel resolve/apaga: todo acesso passa pelo lock

from __future__ import annotations
from collections import Counter
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import logging
import threading

from src.domain.entities.alert import Alert
from src.domain.repositories.alert_repository import IAlertRepository

log = logging.getLogger("aquamind.alerts.log")


class InMemoryAlertLog(IAlertRepository):
    """Implementação em memória de IAlertRepository, com limite de histórico."""

    def __init__(self, max_history: int = 1000, initial: Iterable[Alert] = ()) -> None:
        self._max_history = max_history
        self._alerts: List[Alert] = []
        self._lock = threading.RLock()
        for a in initial:
            self.save(a)

    def __len__(self) -> int:
        with self._lock:
            return len(self._alerts)

    # assinatura compatível com subscribe_alerts(callback)
    def __call__(self, alert: Alert) -> None:
        self.save(alert)

    def save(self, alert: Alert) -> None:
        with self._lock:
            self._alerts.append(alert)
            if len(self._alerts) > self._max_history:
                del self._alerts[:-self._max_history]

    def get(self, alert_id: str) -> Optional[Alert]:
        with self._lock:
            return next((a for a in self._alerts if a.id == alert_id), None)

    def list_recent(self, limit: int = 100) -> List[Alert]:
        with self._lock:
            return self._alerts[-limit:][::-1]  # mais novos primeiro

    def list_open_by_tank(self, tank_id: str) -> List[Alert]:
        with self._lock:
            return [a for a in self._alerts if a.tank_id == tank_id and not a.resolved]

    def list_open(self) -> List[Alert]:
        with self._lock:
            return [a for a in self._alerts if not a.resolved]

    def resolve(self, alert_id: str, when: Optional[datetime] = None) -> bool:
        with self._lock:
            for i, a in enumerate(self._alerts):
                if a.id == alert_id:
                    self._alerts[i] = a.resolve(when)
                    break
            else:
                return False
        log.info("alert_resolved id=%s tank=%s", alert_id, a.tank_id)
        return True

    def delete(self, alert_id: str) -> bool:
        with self._lock:
            before = len(self._alerts)
            self._alerts[:] = [a for a in self._alerts if a.id != alert_id]
            removed = len(self._alerts) < before
        if removed:
            log.info("alert_deleted id=%s", alert_id)
        return removed

    def stats(self) -> Dict[str, Any]:
        """Contagens para os cartões do painel."""
        with self._lock:
            open_alerts = [a for a in self._alerts if not a.resolved]
            total = len(self._alerts)
        return {
            "total": total,
            "open": len(open_alerts),
            "by_severity": dict(Counter(a.severity.value for a in open_alerts)),
            "by_type": dict(Counter(a.type.value for a in open_alerts)),
        }
