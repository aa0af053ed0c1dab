from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from src.domain.enums import TankStatus


def _parse_ts(value) -> datetime:
    """Aceita datetime ou ISO-8601 (inclusive sufixo 'Z') e devolve UTC."""
    if isinstance(value, datetime):
        ts = value
    else:
        ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Tank:
    """
    Representa um reservatório de água monitorado.
    - Imutável (dataclass frozen): o registro troca a instância a cada mudança
    - Valida campos essenciais no __post_init__
    - Expõe propriedades derivadas (percentual e horas até esvaziar)
    - Serializa para dicionário com valores prontos para API/log
    """
    tank_id: str
    name: str
    capacity_liters: float
    current_liters: float
    avg_consumption_lph: float               # litros por hora
    last_refill: datetime
    owner: Optional[str] = None              # None => tanque comunitário
    is_community: bool = False
    location: Optional[str] = None
    status: TankStatus = TankStatus.HEALTHY

    def __post_init__(self):
        """
        Regras de consistência de dados:
        - tank_id e nome não podem ser vazios
        - capacidade > 0 (litros)
        - 0 <= volume atual <= capacidade
        - consumo médio >= 0
        """
        if not str(self.tank_id).strip():
            raise ValueError("Identificador do tanque não pode estar vazio.")
        if not self.name.strip():
            raise ValueError("Nome do tanque não pode estar vazio.")
        if self.capacity_liters <= 0:
            raise ValueError("Capacidade deve ser > 0 (litros).")
        if not (0 <= self.current_liters <= self.capacity_liters):
            raise ValueError(
                f"Volume atual inválido: {self.current_liters} L. Range: 0-{self.capacity_liters} L"
            )
        if self.avg_consumption_lph < 0:
            raise ValueError("Consumo médio não pode ser negativo.")
        if self.last_refill.tzinfo is None:
            object.__setattr__(self, "last_refill", self.last_refill.replace(tzinfo=timezone.utc))

    @property
    def fill_percentage(self) -> float:
        """Percentual de enchimento (0–100)."""
        return self.current_liters / self.capacity_liters * 100.0

    @property
    def hours_to_empty(self) -> float:
        """
        Previsão linear de horas até esvaziar.
        Retorna infinito se o consumo médio for 0 para evitar divisão por zero.
        """
        if self.avg_consumption_lph == 0:
            return float("inf")
        return self.current_liters / self.avg_consumption_lph

    def with_level(self, current_liters: float, status: TankStatus) -> "Tank":
        """Nova instância com volume (limitado a [0, capacidade]) e status atualizados."""
        clamped = max(0.0, min(float(current_liters), self.capacity_liters))
        return replace(self, current_liters=clamped, status=status)

    def refilled(self, when: Optional[datetime] = None) -> "Tank":
        """Tanque cheio, status saudável e data de reabastecimento atualizada."""
        return replace(
            self,
            current_liters=self.capacity_liters,
            status=TankStatus.HEALTHY,
            last_refill=when or datetime.now(timezone.utc),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Tank":
        """Constrói um Tank a partir da configuração (ex.: SEED_TANKS)."""
        status = data.get("status", TankStatus.HEALTHY)
        return cls(
            tank_id=str(data["tank_id"]),
            name=data["name"],
            capacity_liters=float(data["capacity_liters"]),
            current_liters=float(data["current_liters"]),
            avg_consumption_lph=float(data.get("avg_consumption_lph", 0.0)),
            last_refill=_parse_ts(data.get("last_refill") or datetime.now(timezone.utc)),
            owner=data.get("owner"),
            is_community=bool(data.get("is_community", data.get("owner") is None)),
            location=data.get("location"),
            status=status if isinstance(status, TankStatus) else TankStatus(status),
        )

    def to_dict(self) -> dict:
        """
        Serialização amigável para APIs/logs.
        - 'status' exportado como valor do enum
        - 'fill_percentage' arredondado em 1 casa decimal
        """
        return {
            "tank_id": self.tank_id,
            "name": self.name,
            "owner": self.owner,
            "capacity_liters": self.capacity_liters,
            "current_liters": round(self.current_liters, 2),
            "avg_consumption_lph": self.avg_consumption_lph,
            "last_refill": self.last_refill.isoformat(),
            "is_community": self.is_community,
            "location": self.location,
            "status": self.status.value,
            "fill_percentage": round(self.fill_percentage, 1),
        }
