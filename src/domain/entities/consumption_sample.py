from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class ConsumptionSample:
    """
    Ponto do histórico de nível de um tanque, usado apenas nos gráficos.
    Não faz parte do estado da simulação.
    """

    timestamp: datetime
    tank_id: str
    liters: float
    percentage: float

    def __post_init__(self) -> None:
        # Normaliza timestamp para UTC
        if self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))
        if self.liters < 0:
            raise ValueError(f"Volume inválido no histórico: {self.liters} L")

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "tank_id": self.tank_id,
            "liters": self.liters,
            "percentage": self.percentage,
        }
