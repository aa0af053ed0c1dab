# src/domain/use_cases/evaluate_alerts_use_case.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import count
from typing import Callable, List, Optional, Tuple
import logging

from config.settings import LEVEL_THRESHOLDS, PREDICTION_THRESHOLDS_HOURS as PTH
from src.domain.consumption_model import RandomSource, expected_consumption
from src.domain.entities.alert import Alert
from src.domain.entities.tank import Tank
from src.domain.enums import AlertType, Severity
from src.domain.repositories.cooldown_repository import IAlertCooldownRepository
from src.domain.value_objects import SimulationConfig

log = logging.getLogger("aquamind.usecases.alerts")

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class EvaluateAlertsResult:
    """
    DTO imutável retornado pelo caso de uso.

    Atributos:
        alerts: alertas emitidos nesta avaliação, na ordem de prioridade
                das regras (pode ser vazia).
    """
    alerts: List[Alert]


class EvaluateAlertsUseCase:
    """
    Motor de regras de alerta dos tanques.

    Avalia três categorias independentes (nível, previsão e consumo) e emite
    no máximo um alerta por categoria. Cada instância de regra
    (tanque, tipo, severidade) só é emitida uma vez por janela de cooldown;
    repetições dentro da janela são suprimidas sem notificar ninguém.
    """

    def __init__(
        self,
        cooldown_repo: IAlertCooldownRepository,
        rng: RandomSource,
        config: Optional[SimulationConfig] = None,
        clock: Clock = _utc_now,
    ) -> None:
        """
        Injeta o cache de cooldown, a fonte de aleatoriedade e o relógio.

        Args:
            cooldown_repo: guarda o último disparo de cada instância de regra.
            rng: usado na checagem de pico de consumo.
            config: parâmetros da simulação (padrão: settings).
            clock: relógio de parede usado no cooldown e nos timestamps.
        """
        self.cooldown_repo = cooldown_repo
        self.rng = rng
        self.config = config or SimulationConfig()
        self.clock = clock
        self._seq = count(1)

    def execute(self, tank: Tank) -> EvaluateAlertsResult:
        """
        Avalia o tanque já atualizado pelo tick.

        Fluxo:
            1) Regra de nível (CRITICAL <= 5%, HIGH <= 20%)
            2) Regra preditiva por horas até esvaziar (3h / 12h / 24h)
            3) Checagem aleatória de pico de consumo
            4) Cada candidato passa pelo cooldown antes de ser emitido

        Returns:
            EvaluateAlertsResult com os alertas efetivamente emitidos.
        """
        now = self.clock()
        alerts: List[Alert] = []

        level = self._level_severity(tank)
        if level is not None:
            self._emit(alerts, tank, AlertType.LEVEL, level, now,
                       lambda aid: Alert.level(tank.tank_id, tank.name, tank.fill_percentage, level, aid, now))

        prediction = self._prediction_severity(tank)
        if prediction is not None:
            hours = tank.hours_to_empty
            self._emit(alerts, tank, AlertType.PREDICTION, prediction, now,
                       lambda aid: Alert.prediction(tank.tank_id, tank.name, hours, prediction, aid, now))

        spike = self._usage_spike(tank)
        if spike is not None:
            expected, observed = spike
            self._emit(alerts, tank, AlertType.USAGE, Severity.MEDIUM, now,
                       lambda aid: Alert.usage_spike(tank.tank_id, tank.name, expected, observed, aid, now))

        return EvaluateAlertsResult(alerts=alerts)

    def refill_alert(self, tank: Tank) -> Alert:
        """
        Alerta de manutenção do reabastecimento.
        Sempre emitido: não consulta nem atualiza o cooldown.
        """
        now = self.clock()
        alert = Alert.refill(tank.tank_id, tank.name, self._next_id(now), now)
        log.info("refill_alert tank=%s id=%s", tank.tank_id, alert.id)
        return alert

    # ---------- helpers ----------
    def _emit(self, out: List[Alert], tank: Tank, alert_type: AlertType, severity: Severity,
              now: datetime, build: Callable[[str], Alert]) -> None:
        """Aplica o cooldown e, se liberado, cria o alerta e registra a emissão."""
        key = Alert.rule_key(tank.tank_id, alert_type, severity)
        if self.cooldown_repo.is_cooling_down(key, now):
            log.debug("alert_suppressed key=%s", key)
            return
        self.cooldown_repo.mark(key, now)
        alert = build(self._next_id(now))
        out.append(alert)
        log.warning("alert_generated tank=%s type=%s severity=%s id=%s",
                    tank.tank_id, alert_type.value, severity.value, alert.id)

    def _next_id(self, now: datetime) -> str:
        # instante em ms + sequência: distingue alertas emitidos no mesmo ms
        return f"alert-{int(now.timestamp() * 1000)}-{next(self._seq)}"

    @staticmethod
    def _level_severity(tank: Tank) -> Optional[Severity]:
        pct = tank.fill_percentage
        if pct <= LEVEL_THRESHOLDS["critical_pct"] and tank.current_liters > 0:
            return Severity.CRITICAL
        if LEVEL_THRESHOLDS["critical_pct"] < pct <= LEVEL_THRESHOLDS["low_pct"]:
            return Severity.HIGH
        return None

    @staticmethod
    def _prediction_severity(tank: Tank) -> Optional[Severity]:
        """
        Faixas de horas até esvaziar. Consumo zero resulta em infinito,
        que não cai em nenhuma faixa (nunca dispara).
        """
        hours = tank.hours_to_empty
        if 0 < hours <= PTH["critical"]:
            return Severity.CRITICAL
        if PTH["critical"] < hours <= PTH["high"]:
            return Severity.HIGH
        if PTH["high"] < hours <= PTH["medium"]:
            return Severity.MEDIUM
        return None

    def _usage_spike(self, tank: Tank) -> Optional[Tuple[float, float]]:
        """
        Sorteia um pico com probabilidade spike_probability.
        Retorna (esperado, observado) quando o observado passa do limiar.
        """
        cfg = self.config
        expected = expected_consumption(tank, cfg.simulated_hours_per_tick)
        spiking = float(self.rng.random()) < cfg.spike_probability
        observed = expected * (cfg.spike_multiplier if spiking else 1.0)
        if observed > expected * cfg.spike_alert_threshold:
            return expected, observed
        return None
