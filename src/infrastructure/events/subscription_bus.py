from __future__ import annotations
from threading import Lock
from typing import Callable, Generic, List, TypeVar
import logging

from src.domain.entities.alert import Alert
from src.domain.entities.tank import Tank

log = logging.getLogger("aquamind.bus")

T = TypeVar("T")

TankListener = Callable[[List[Tank]], None]
AlertListener = Callable[[Alert], None]


class Subscription:
    """
    Handle devolvido no registro de um listener.
    Chamar o handle (ou cancel()) remove o listener; chamadas repetidas são no-op.
    """

    def __init__(self, channel: "_Channel", callback: Callable) -> None:
        self._channel = channel
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._channel.remove(self)

    __call__ = cancel


class _Channel(Generic[T]):
    """Lista de assinaturas de um tipo de evento, em ordem de registro."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._subs: List[Subscription] = []
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._subs)

    def add(self, callback: Callable[[T], None]) -> Subscription:
        sub = Subscription(self, callback)
        with self._lock:
            self._subs.append(sub)
        return sub

    def remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subs:
                self._subs.remove(sub)

    def snapshot(self) -> List[Subscription]:
        # a entrega percorre uma cópia: cancelar no meio não altera a rodada atual
        with self._lock:
            return list(self._subs)


class SubscriptionBus:
    """
    Barramento síncrono com dois canais independentes:
    - tanques: recebe uma lista (cópia própria por listener) após cada tick
    - alertas: recebe um Alert por vez, na ordem de emissão

    Um listener que levanta exceção é logado e não impede a entrega aos demais.
    """

    def __init__(self) -> None:
        self._tanks: _Channel[List[Tank]] = _Channel("tanks")
        self._alerts: _Channel[Alert] = _Channel("alerts")

    @property
    def tank_listener_count(self) -> int:
        return len(self._tanks)

    @property
    def alert_listener_count(self) -> int:
        return len(self._alerts)

    def subscribe_tank_updates(self, callback: TankListener) -> Subscription:
        return self._tanks.add(callback)

    def subscribe_alerts(self, callback: AlertListener) -> Subscription:
        return self._alerts.add(callback)

    def publish_tanks(self, tanks: List[Tank]) -> None:
        for sub in self._tanks.snapshot():
            self._deliver(self._tanks.name, sub, list(tanks))

    def publish_alert(self, alert: Alert) -> None:
        for sub in self._alerts.snapshot():
            self._deliver(self._alerts.name, sub, alert)

    @staticmethod
    def _deliver(channel: str, sub: Subscription, payload) -> None:
        try:
            sub.callback(payload)
        except Exception:
            log.exception("listener_failed channel=%s callback=%r", channel, sub.callback)
