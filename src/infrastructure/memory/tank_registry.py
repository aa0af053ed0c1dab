# implementação concreta do registro de tanques em memória
# a sessão inteira do simulador lê/escreve aqui (não há persistência entre sessões)

from __future__ import annotations
from collections import OrderedDict
from typing import Iterable, List, Optional

from src.domain.entities.tank import Tank
from src.domain.repositories.tank_repository import ITankRepository


class InMemoryTankRegistry(ITankRepository):
    """
    Coleção ordenada de tanques (ordem de cadastro).

    Como Tank é imutável, list_all() devolve uma lista nova com as instâncias
    atuais: quem recebe pode alterar a lista sem afetar o registro.
    """

    def __init__(self, tanks: Iterable[Tank] = ()) -> None:
        self._tanks: "OrderedDict[str, Tank]" = OrderedDict()
        for t in tanks:
            if t.tank_id in self._tanks:
                raise ValueError(f"tank_id duplicado: {t.tank_id}")
            self._tanks[t.tank_id] = t

    def __len__(self) -> int:
        return len(self._tanks)

    def __contains__(self, tank_id: str) -> bool:
        return tank_id in self._tanks

    def get(self, tank_id: str) -> Optional[Tank]:
        return self._tanks.get(tank_id)

    def list_all(self) -> List[Tank]:
        return list(self._tanks.values())

    def save(self, tank: Tank) -> None:
        # atribuir numa chave existente mantém a posição no OrderedDict
        self._tanks[tank.tank_id] = tank
