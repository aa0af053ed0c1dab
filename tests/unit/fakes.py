# dublês usados pelos testes unitários (sem rede, sem threads, sem acaso)
from __future__ import annotations
from datetime import datetime, timedelta, timezone

from src.domain.entities.tank import Tank


class FixedRng:
    """
    Fonte aleatória determinística.
    uniform() devolve o ponto `fraction` da faixa; random() devolve `draw`
    (0.99 => nunca há pico de consumo).
    """

    def __init__(self, fraction: float = 0.5, draw: float = 0.99) -> None:
        self.fraction = fraction
        self.draw = draw

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.fraction

    def random(self) -> float:
        return self.draw


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 9, 2, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kw) -> None:
        self.now += timedelta(**kw)


def make_tank(tank_id="t1", capacity=1000.0, current=1000.0, rate=100.0, **kw) -> Tank:
    return Tank(
        tank_id=tank_id,
        name=kw.pop("name", f"Tanque {tank_id}"),
        capacity_liters=capacity,
        current_liters=current,
        avg_consumption_lph=rate,
        last_refill=datetime(2024, 9, 1, tzinfo=timezone.utc),
        **kw,
    )
