from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
from typing import Tuple

from config.settings import SIMULATION_SETTINGS

@dataclass(frozen=True)
class SimulationConfig:
    """
    Value Object com os parâmetros da simulação.

    - Imutável (frozen).
    - Valores padrão vêm de SIMULATION_SETTINGS.
    - Valida faixas no __post_init__; valores inválidos levantam ValueError.
    """
    tick_interval_ms: int = SIMULATION_SETTINGS['tick_interval_ms']
    simulated_hours_per_tick: float = SIMULATION_SETTINGS['simulated_hours_per_tick']
    variance_range: Tuple[float, float] = (
        SIMULATION_SETTINGS['variance_min'],
        SIMULATION_SETTINGS['variance_max'],
    )
    alert_cooldown_ms: int = SIMULATION_SETTINGS['alert_cooldown_ms']
    spike_probability: float = SIMULATION_SETTINGS['spike_probability']
    spike_multiplier: float = SIMULATION_SETTINGS['spike_multiplier']
    spike_alert_threshold: float = SIMULATION_SETTINGS['spike_alert_threshold']

    def __post_init__(self):
        if self.tick_interval_ms <= 0:
            raise ValueError(f"Intervalo de tick inválido: {self.tick_interval_ms} ms")
        if self.simulated_hours_per_tick < 0:
            raise ValueError(f"Horas simuladas por tick não podem ser negativas: {self.simulated_hours_per_tick}")
        lo, hi = self.variance_range
        if lo < 0 or hi < lo:
            raise ValueError(f"Faixa de variância inválida: {self.variance_range}")
        if self.alert_cooldown_ms < 0:
            raise ValueError(f"Cooldown inválido: {self.alert_cooldown_ms} ms")
        if not (0.0 <= self.spike_probability <= 1.0):
            raise ValueError(f"Probabilidade de pico fora de [0, 1]: {self.spike_probability}")

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    @property
    def alert_cooldown(self) -> timedelta:
        return timedelta(milliseconds=self.alert_cooldown_ms)
