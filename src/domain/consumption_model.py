# modelo de consumo: quantos litros saem do tanque em um intervalo simulado
from __future__ import annotations
from typing import Protocol, Tuple

from src.domain.entities.tank import Tank


class RandomSource(Protocol):
    """
    Fonte de aleatoriedade injetável.
    numpy.random.Generator (default_rng) já satisfaz este contrato;
    nos testes basta um objeto com valores fixos.
    """

    def uniform(self, low: float, high: float) -> float:
        ...

    def random(self) -> float:
        ...


def expected_consumption(tank: Tank, elapsed_hours: float) -> float:
    """Consumo esperado (sem ruído) em litros para o intervalo."""
    return tank.avg_consumption_lph * elapsed_hours


def depletion_liters(
    tank: Tank,
    elapsed_hours: float,
    rng: RandomSource,
    variance_range: Tuple[float, float] = (0.8, 1.2),
) -> float:
    """
    Litros consumidos no intervalo simulado.

    - base = consumo médio (L/h) × horas decorridas
    - fator de variância sorteado uniformemente em variance_range (ruído de uso/sensor)
    - nunca retira mais do que o volume atual (o tanque não fica negativo)
    """
    base = expected_consumption(tank, elapsed_hours)
    factor = float(rng.uniform(*variance_range))
    return max(0.0, min(base * factor, tank.current_liters))
