# src/domain/use_cases/generate_history_use_case.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
import logging

import pandas as pd

from config.settings import HISTORY_HOURS_BACK, HISTORY_VARIANCE
from src.domain.consumption_model import RandomSource
from src.domain.entities.consumption_sample import ConsumptionSample
from src.domain.entities.tank import Tank

log = logging.getLogger("aquamind.usecases.history")


@dataclass(frozen=True)
class HistoryResult:
    """
    DTO imutável com o histórico reconstruído de um tanque.

    Atributos:
        samples: amostras horárias em ordem cronológica crescente.
    """
    samples: List[ConsumptionSample]

    def to_frame(self) -> pd.DataFrame:
        """DataFrame (timestamp, tank_id, liters, percentage) para os gráficos."""
        df = pd.DataFrame([s.to_dict() for s in self.samples],
                          columns=["timestamp", "tank_id", "liters", "percentage"])
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
        return df


class GenerateHistoryUseCase:
    """
    Reconstrói um histórico plausível de nível a partir do estado atual:
    volta no tempo somando o consumo médio hora a hora, com ±10% de ruído.
    Nada é persistido; serve apenas para desenhar tendências.
    """

    def __init__(self, rng: RandomSource, variance: Tuple[float, float] = HISTORY_VARIANCE) -> None:
        self.rng = rng
        self.variance = variance

    def execute(self, tank: Tank, hours_back: int = HISTORY_HOURS_BACK,
                now: Optional[datetime] = None) -> HistoryResult:
        """
        Gera hours_back + 1 amostras (da mais antiga até agora).

        - litros = (atual + i × consumo médio) × ruído, limitado a [0, capacidade]
        - litros e percentual arredondados para inteiro
        """
        if hours_back < 0:
            raise ValueError(f"hours_back deve ser >= 0: {hours_back}")
        now = now or datetime.now(timezone.utc)

        samples: List[ConsumptionSample] = []
        for i in range(hours_back, -1, -1):
            ts = now - timedelta(hours=i)
            base = tank.current_liters + i * tank.avg_consumption_lph
            liters = base * float(self.rng.uniform(*self.variance))
            liters = min(max(liters, 0.0), tank.capacity_liters)
            samples.append(ConsumptionSample(
                timestamp=ts,
                tank_id=tank.tank_id,
                liters=float(round(liters)),
                percentage=float(round(liters / tank.capacity_liters * 100)),
            ))

        samples.sort(key=lambda s: s.timestamp)
        log.info("history_generated tank=%s points=%s", tank.tank_id, len(samples))
        return HistoryResult(samples=samples)
