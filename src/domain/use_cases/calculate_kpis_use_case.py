# src/domain/use_cases/calculate_kpis_use_case.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, Iterable
import logging

from src.domain.entities.tank import Tank
from src.domain.enums import TankStatus

log = logging.getLogger("aquamind.usecases.kpis")

@dataclass(frozen=True)
class KPIResult:
    """
    DTO imutável para retorno do caso de uso.

    Atributos:
        summary: dicionário com agregações calculadas. Chaves:
            - 'total_water_stored': float (L)
            - 'total_capacity': float (L)
            - 'utilization_percentage': int | None
            - 'community_tanks': int
            - 'avg_daily_consumption': int (L/dia, soma das taxas × 24)
            - 'next_refill_eta_hours': int | None
            - 'critical_tank_count': int
            - 'low_tank_count': int
    """
    summary: Dict[str, Any]

class CalculateKPIsUseCase:
    """
    Indicadores agregados da frota de tanques exibidos no topo do painel.
    """

    def execute(self, tanks: Iterable[Tank]) -> KPIResult:
        """
        Calcula os indicadores para o snapshot informado.

        O ETA de reabastecimento considera o tanque LOW/CRITICAL com menor
        percentual; tanques sem consumo (ETA infinito) não geram ETA.
        """
        tanks = list(tanks)
        total_capacity = sum(t.capacity_liters for t in tanks)
        total_current = sum(t.current_liters for t in tanks)

        urgent = sorted(
            (t for t in tanks if t.status in (TankStatus.CRITICAL, TankStatus.LOW)),
            key=lambda t: t.fill_percentage,
        )
        eta = None
        if urgent and urgent[0].hours_to_empty != float("inf"):
            eta = int(round(max(0.0, urgent[0].hours_to_empty)))

        summary = {
            "total_water_stored": total_current,
            "total_capacity": total_capacity,
            "utilization_percentage": round(total_current / total_capacity * 100) if total_capacity else None,
            "community_tanks": sum(1 for t in tanks if t.is_community),
            "avg_daily_consumption": round(sum(t.avg_consumption_lph for t in tanks) * 24),
            "next_refill_eta_hours": eta,
            "critical_tank_count": sum(1 for t in tanks if t.status is TankStatus.CRITICAL),
            "low_tank_count": sum(1 for t in tanks if t.status is TankStatus.LOW),
        }
        log.info("kpis_generated tanks=%s utilization=%s", len(tanks), summary["utilization_percentage"])
        return KPIResult(summary=summary)
