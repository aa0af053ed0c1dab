"""
Módulo de definição de alertas do domínio.

Este módulo concentra o tipo imutável `Alert`, responsável por representar
eventos relevantes detectados no monitoramento dos reservatórios (nível baixo,
previsão de esvaziamento, picos de consumo, reabastecimentos). O objetivo é
fornecer uma unidade de informação autocontida e consistente, adequada para
exibição no painel e auditoria.

Princípios e invariantes adotados
---------------------------------
- **Imutabilidade**: `Alert` é um `dataclass(frozen=True)`. Qualquer mudança
  (p.ex., marcar como resolvido) gera **uma nova instância**.
- **Temporalidade em UTC**: `created_at` e `resolved_at` são normalizados para
  timezone UTC. Se valores "naive" (sem tzinfo) forem fornecidos, são
  ajustados para UTC no `__post_init__`.
- **Identificação**: `id` deve ser único na sessão; quem gera o id é o motor
  de regras (instante de emissão + sequência).
- **Semântica de resolução**: `resolved` indica se o alerta já foi tratado;
  `resolved_at` guarda o instante da resolução.

Campos livres
-------------
- `metadata` carrega as entradas da regra que disparou o alerta (percentual,
  horas até esvaziar, consumo esperado/observado) para rastreabilidade.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone, timedelta
from typing import Optional, Dict, Any

from src.domain.enums import AlertType, Severity


@dataclass(frozen=True)
class Alert:
    """
    Entidade imutável que representa um alerta gerado pelo sistema.

    Attributes:
        id: Identificador único do alerta na sessão.
        tank_id: Tanque de origem.
        type: Tipo do alerta (ex.: `AlertType.LEVEL`).
        severity: Nível de severidade (LOW, MEDIUM, HIGH, CRITICAL).
        message: Texto exibido ao operador.
        created_at: Instante de emissão do alerta (normalizado para UTC).
        resolved: Indica se o alerta já foi tratado.
        metadata: Entradas da regra que disparou o alerta (opcional).
        resolved_at: Instante de resolução (UTC), se já resolvido.
    """

    id: str
    tank_id: str
    type: AlertType
    severity: Severity
    message: str
    created_at: datetime
    resolved: bool = False
    metadata: Optional[Dict[str, Any]] = None
    resolved_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        # datas sem tzinfo são tratadas como UTC
        for name in ("created_at", "resolved_at"):
            value = getattr(self, name)
            if value is not None and value.tzinfo is None:
                object.__setattr__(self, name, value.replace(tzinfo=timezone.utc))

    def resolve(self, when: Optional[datetime] = None) -> "Alert":
        """Devolve uma cópia marcada como resolvida (agora, em UTC, se `when` for omitido)."""
        return replace(self, resolved=True, resolved_at=when or datetime.now(timezone.utc))

    @property
    def duration(self) -> Optional[timedelta]:
        """Tempo em aberto; None enquanto não resolvido."""
        if self.resolved_at is None:
            return None
        return self.resolved_at - self.created_at

    @staticmethod
    def rule_key(tank_id: str, alert_type: AlertType, severity: Severity) -> str:
        """Chave da instância de regra (tanque, tipo, severidade), usada no cooldown."""
        return f"{tank_id}-{alert_type.value}-{severity.value}"

    @property
    def dedup_key(self) -> str:
        return Alert.rule_key(self.tank_id, self.type, self.severity)

    def to_dict(self) -> dict:
        """Serialização para o painel/log, com enums exportados pelo valor."""
        return {
            "id": self.id,
            "tank_id": self.tank_id,
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
            "resolved": self.resolved,
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
            "metadata": dict(self.metadata or {}),
        }

    # -------------------------------------------------------------------------
    # Fábricas especializadas
    # -------------------------------------------------------------------------

    @staticmethod
    def level(
        tank_id: str,
        tank_name: str,
        percentage: float,
        severity: Severity,
        alert_id: str,
        when: Optional[datetime] = None,
    ) -> "Alert":
        """
        Cria um alerta de nível (percentual abaixo dos limiares).

        Mensagens geradas:
            CRITICAL: "{nome} está criticamente baixo (x.x%) - ação imediata necessária!"
            demais:   "{nome} está com nível baixo (x.x%) - reabastecimento recomendado"
        """
        if severity is Severity.CRITICAL:
            msg = f"{tank_name} está criticamente baixo ({percentage:.1f}%) - ação imediata necessária!"
        else:
            msg = f"{tank_name} está com nível baixo ({percentage:.1f}%) - reabastecimento recomendado"
        return Alert(
            alert_id,
            tank_id,
            AlertType.LEVEL,
            severity,
            msg,
            when or datetime.now(timezone.utc),
            metadata={"percentage": percentage},
        )

    @staticmethod
    def prediction(
        tank_id: str,
        tank_name: str,
        hours_to_empty: float,
        severity: Severity,
        alert_id: str,
        when: Optional[datetime] = None,
    ) -> "Alert":
        """
        Cria um alerta preditivo (esvaziamento previsto em poucas horas).

        Para severidade MEDIUM a mensagem sugere planejar o reabastecimento.
        """
        msg = f"{tank_name} deve esvaziar em {hours_to_empty:.1f} horas"
        if severity is Severity.MEDIUM:
            msg += " - planeje o reabastecimento"
        return Alert(
            alert_id,
            tank_id,
            AlertType.PREDICTION,
            severity,
            msg,
            when or datetime.now(timezone.utc),
            metadata={"hours_to_empty": hours_to_empty},
        )

    @staticmethod
    def usage_spike(
        tank_id: str,
        tank_name: str,
        expected_liters: float,
        observed_liters: float,
        alert_id: str,
        when: Optional[datetime] = None,
    ) -> "Alert":
        """Cria um alerta de pico de consumo (possível vazamento), severidade MEDIUM."""
        msg = f"{tank_name} apresenta pico incomum de consumo - possível vazamento"
        return Alert(
            alert_id,
            tank_id,
            AlertType.USAGE,
            Severity.MEDIUM,
            msg,
            when or datetime.now(timezone.utc),
            metadata={"expected_liters": expected_liters, "observed_liters": observed_liters},
        )

    @staticmethod
    def refill(tank_id: str, tank_name: str, alert_id: str, when: Optional[datetime] = None) -> "Alert":
        """Registra um reabastecimento manual (severidade LOW, tipo MAINTENANCE)."""
        return Alert(
            alert_id,
            tank_id,
            AlertType.MAINTENANCE,
            Severity.LOW,
            f"{tank_name} foi reabastecido até a capacidade máxima",
            when or datetime.now(timezone.utc),
        )
