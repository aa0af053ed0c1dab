from __future__ import annotations

from config.settings import LEVEL_THRESHOLDS
from src.domain.enums import TankStatus


def classify_status(percentage: float, previous: TankStatus) -> TankStatus:
    """
    Mapeia o percentual de enchimento para o status do tanque.

    - <= 5%  -> CRITICAL
    - <= 20% -> LOW
    - >= 90% -> HEALTHY
    - entre 20% e 90% mantém o status anterior (histerese, evita oscilação)

    MAINTENANCE é um override manual: nunca é produzido aqui e, se já
    estiver definido, é preservado.
    """
    if previous is TankStatus.MAINTENANCE:
        return previous
    if percentage <= LEVEL_THRESHOLDS["critical_pct"]:
        return TankStatus.CRITICAL
    if percentage <= LEVEL_THRESHOLDS["low_pct"]:
        return TankStatus.LOW
    if percentage >= LEVEL_THRESHOLDS["healthy_pct"]:
        return TankStatus.HEALTHY
    return previous
