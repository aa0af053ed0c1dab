# src/domain/repositories/tank_repository.py
from __future__ import annotations
from typing import Protocol, Optional, List
from src.domain.entities.tank import Tank

class ITankRepository(Protocol):
    """
    Contrato do registro de tanques (fonte única de verdade da simulação).

    Implementações concretas devem preservar a ordem de cadastro, pois o
    simulador processa os tanques sequencialmente nessa ordem.
    """

    def get(self, tank_id: str) -> Optional[Tank]:
        """Tanque com o id informado, ou None."""
        ...

    def list_all(self) -> List[Tank]:
        """Lista (cópia) de todos os tanques na ordem de cadastro."""
        ...

    def save(self, tank: Tank) -> None:
        """Substitui o registro do tanque (mesmo tank_id) mantendo sua posição."""
        ...
