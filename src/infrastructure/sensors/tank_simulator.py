# Simulador contínuo de consumo dos tanques (substitui os sensores reais)
# Execução:
#   python -m src.infrastructure.sensors.tank_simulator --interval 5 --hours-per-tick 0.1 --spike-prob 0.05
# Expõe TankSimulation/start_simulation para o painel (run.py) usar

from __future__ import annotations

import argparse
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Tuple, Union

from numpy.random import default_rng

from config.seed_tanks import SEED_TANKS
from src.domain.consumption_model import RandomSource, depletion_liters
from src.domain.entities.alert import Alert
from src.domain.entities.tank import Tank
from src.domain.enums import TankStatus
from src.domain.errors import ConfigurationError
from src.domain.repositories.cooldown_repository import IAlertCooldownRepository
from src.domain.repositories.tank_repository import ITankRepository
from src.domain.status_classifier import classify_status
from src.domain.use_cases.evaluate_alerts_use_case import EvaluateAlertsUseCase
from src.domain.value_objects import SimulationConfig
from src.infrastructure.events.subscription_bus import (
    AlertListener, Subscription, SubscriptionBus, TankListener,
)
from src.infrastructure.memory.alert_log import InMemoryAlertLog
from src.infrastructure.memory.cooldown_cache import InMemoryCooldownCache
from src.infrastructure.memory.tank_registry import InMemoryTankRegistry

log = logging.getLogger("aquamind.simulation")

TankLike = Union[Tank, dict]

# ===== Helpers =====
def _utc_now() -> datetime:
    return datetime.now(timezone.utc)

def _as_tank(t: TankLike) -> Tank:
    return t if isinstance(t, Tank) else Tank.from_dict(t)

def load_seed_tanks() -> List[Tank]:
    """Tanques de demonstração definidos em config/seed_tanks.py."""
    return [Tank.from_dict(d) for d in SEED_TANKS]


# =========================
# Simulação
# =========================
class TankSimulation:
    """
    Simulação de telemetria dos tanques.

    Estados: parado -> rodando -> parado. start() e stop() são idempotentes.
    Cada tick (a cada tick_interval_ms de relógio) aplica
    simulated_hours_per_tick a todos os tanques, na ordem do registro:
    consumo -> classificação -> regras de alerta. Só depois de processar
    todos os tanques o barramento entrega um snapshot dos tanques e, em
    seguida, os alertas do tick.

    O tick roda numa thread própria; tick, refill e manutenção são
    serializados por um único lock, então nenhum listener vê um tick pela metade.
    """

    def __init__(
        self,
        tanks: Optional[Iterable[TankLike]],
        config: Optional[SimulationConfig] = None,
        rng: Optional[RandomSource] = None,
        clock: Callable[[], datetime] = _utc_now,
        cooldown_repo: Optional[IAlertCooldownRepository] = None,
        bus: Optional[SubscriptionBus] = None,
    ) -> None:
        initial = [_as_tank(t) for t in (tanks or [])]
        if not initial:
            raise ConfigurationError("Simulação não inicializada: informe os tanques iniciais.")

        self.config = config or SimulationConfig()
        self.rng = rng if rng is not None else default_rng()
        self.clock = clock
        self.registry: ITankRepository = InMemoryTankRegistry(initial)
        self.cooldown_repo = cooldown_repo or InMemoryCooldownCache(self.config.alert_cooldown)
        self.alert_engine = EvaluateAlertsUseCase(self.cooldown_repo, self.rng, self.config, clock)
        self.bus = bus or SubscriptionBus()

        self.tick_count = 0
        self._lock = threading.RLock()          # estado dos tanques/cooldown
        self._state_lock = threading.Lock()     # ciclo de vida (start/stop)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ---------- ciclo de vida ----------
    @property
    def is_running(self) -> bool:
        return self._thread is not None

    def start(self) -> "TankSimulation":
        with self._state_lock:
            if self._thread is not None:
                return self  # já rodando
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name=f"tank-simulation-{id(self):x}",
                daemon=True,
            )
            self._thread.start()
        log.info("simulation_started tanks=%s interval_ms=%s hours_per_tick=%s",
                 len(self.registry), self.config.tick_interval_ms, self.config.simulated_hours_per_tick)
        return self

    def stop(self) -> None:
        with self._state_lock:
            thread = self._thread
            if thread is None:
                return
            self._thread = None
            self._stop_event.set()
        # um tick em andamento termina antes da thread sair;
        # se stop() vier de um listener (mesma thread) não dá para esperar por ela
        if thread is not threading.current_thread():
            thread.join()
        log.info("simulation_stopped ticks=%s", self.tick_count)

    def _run(self, stop_event: threading.Event) -> None:
        interval = self.config.tick_interval_seconds
        while not stop_event.wait(interval):
            try:
                self.tick()
            except Exception:
                log.exception("tick_failed tick=%s", self.tick_count + 1)

    # ---------- tick ----------
    def tick(self) -> List[Alert]:
        """
        Executa um tick de forma síncrona e devolve os alertas emitidos.

        Uma falha num tanque é logada e não impede os demais.
        """
        hours = self.config.simulated_hours_per_tick
        alerts: List[Alert] = []
        with self._lock:
            for tank in self.registry.list_all():
                try:
                    updated = self._advance(tank, hours)
                    self.registry.save(updated)
                    alerts.extend(self.alert_engine.execute(updated).alerts)
                except Exception:
                    log.exception("tank_tick_failed tank=%s", tank.tank_id)
            self.tick_count += 1
            snapshot = self.registry.list_all()

        self.bus.publish_tanks(snapshot)
        for alert in alerts:
            self.bus.publish_alert(alert)
        log.debug("tick_done tick=%s tanks=%s alerts=%s", self.tick_count, len(snapshot), len(alerts))
        return alerts

    def _advance(self, tank: Tank, hours: float) -> Tank:
        used = depletion_liters(tank, hours, self.rng, self.config.variance_range)
        level = tank.current_liters - used
        status = classify_status(level / tank.capacity_liters * 100.0, tank.status)
        return tank.with_level(level, status)

    # ---------- operações externas ----------
    def refill_tank(self, tank_id: str) -> Optional[Alert]:
        """
        Reabastece o tanque (cheio, HEALTHY, last_refill=agora) e emite um
        alerta de manutenção, sem passar pelo cooldown.
        Id desconhecido: no-op (retorna None).
        """
        with self._lock:
            tank = self.registry.get(tank_id)
            if tank is None:
                log.warning("refill_unknown_tank tank=%s", tank_id)
                return None
            refilled = tank.refilled(self.clock())
            self.registry.save(refilled)
            alert = self.alert_engine.refill_alert(refilled)
        self.bus.publish_alert(alert)
        return alert

    def set_maintenance(self, tank_id: str, enabled: bool = True) -> Optional[Tank]:
        """
        Liga/desliga o override de manutenção.
        Ao desligar, o status volta a ser derivado do percentual atual.
        """
        with self._lock:
            tank = self.registry.get(tank_id)
            if tank is None:
                log.warning("maintenance_unknown_tank tank=%s", tank_id)
                return None
            if enabled:
                status = TankStatus.MAINTENANCE
            else:
                status = classify_status(tank.fill_percentage, TankStatus.HEALTHY)
            updated = tank.with_level(tank.current_liters, status)
            self.registry.save(updated)
        log.info("maintenance_set tank=%s enabled=%s status=%s", tank_id, enabled, status.value)
        return updated

    def get_tanks(self) -> List[Tank]:
        with self._lock:
            return self.registry.list_all()

    def get_tank(self, tank_id: str) -> Optional[Tank]:
        with self._lock:
            return self.registry.get(tank_id)

    def subscribe_tank_updates(self, callback: TankListener) -> Subscription:
        return self.bus.subscribe_tank_updates(callback)

    def subscribe_alerts(self, callback: AlertListener) -> Subscription:
        return self.bus.subscribe_alerts(callback)


class SimulationProvider:
    """
    Guarda UMA simulação para quem precisa compartilhá-la (ex.: o painel).
    É um objeto explícito, não um singleton de módulo: testes podem ter vários.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, **kwargs) -> None:
        self.config = config
        self._kwargs = kwargs
        self._instance: Optional[TankSimulation] = None

    @property
    def initialized(self) -> bool:
        return self._instance is not None

    def get(self, tanks: Optional[Iterable[TankLike]] = None) -> TankSimulation:
        """Cria na primeira chamada com tanques; sem tanques e sem instância, falha."""
        if self._instance is None:
            tanks = list(tanks or [])
            if not tanks:
                raise ConfigurationError("Simulação não inicializada. Informe os tanques iniciais.")
            self._instance = TankSimulation(tanks, self.config, **self._kwargs)
        return self._instance

    def start(self, tanks: Optional[Iterable[TankLike]] = None) -> TankSimulation:
        return self.get(tanks).start()

    def stop(self) -> None:
        if self._instance is not None:
            self._instance.stop()


def start_simulation(tanks: Iterable[TankLike], config: Optional[SimulationConfig] = None,
                     **kwargs) -> TankSimulation:
    """Cria uma simulação própria já em execução."""
    return TankSimulation(tanks, config, **kwargs).start()


def start_with_alert_log(provider: SimulationProvider, tanks: Iterable[TankLike],
                         alert_log: Optional[InMemoryAlertLog] = None,
                         autostart: bool = True) -> Tuple[TankSimulation, InMemoryAlertLog]:
    """
    Simulação do provider com um histórico de alertas já assinado.
    A assinatura acontece antes do start(): nenhum alerta do primeiro tick se perde.
    """
    sim = provider.get(tanks)
    alert_log = alert_log if alert_log is not None else InMemoryAlertLog()
    sim.subscribe_alerts(alert_log)
    if autostart:
        sim.start()
    return sim, alert_log


# ===== Runner CLI =====
def main(argv: Optional[List[str]] = None) -> None:
    defaults = SimulationConfig()
    parser = argparse.ArgumentParser(description="Simulador de consumo dos tanques de água")
    parser.add_argument("--interval", type=float, default=defaults.tick_interval_seconds,
                        help="Segundos (relógio) entre ticks (default: 5)")
    parser.add_argument("--hours-per-tick", type=float, default=defaults.simulated_hours_per_tick,
                        help="Horas simuladas por tick (default: 0.1)")
    parser.add_argument("--spike-prob", type=float, default=defaults.spike_probability,
                        help="Probabilidade de pico de consumo por tanque/tick [0..1]")
    parser.add_argument("--ticks", type=int, default=0, help="Encerra após N ticks (0 = infinito)")
    parser.add_argument("--seed", type=int, default=None, help="Semente do gerador aleatório")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s %(message)s")

    config = SimulationConfig(
        tick_interval_ms=max(1, int(args.interval * 1000)),
        simulated_hours_per_tick=args.hours_per_tick,
        spike_probability=float(max(0.0, min(1.0, args.spike_prob))),
    )
    sim = TankSimulation(load_seed_tanks(), config, rng=default_rng(args.seed))

    def _print_tanks(tanks: List[Tank]) -> None:
        now = _utc_now()
        for t in tanks:
            print(f"[{now.isoformat(timespec='seconds')}] tank={t.tank_id} -> "
                  f"{t.current_liters:.1f}/{t.capacity_liters:.0f} L ({t.fill_percentage:.1f}%) "
                  f"status={t.status.value} eta={t.hours_to_empty:.1f}h")

    def _print_alert(a: Alert) -> None:
        print(f"  ALERTA [{a.severity.value}/{a.type.value}] {a.message}")

    sim.subscribe_tank_updates(_print_tanks)
    sim.subscribe_alerts(_print_alert)

    print(f"Simulador rodando | tanques={len(sim.registry)} | intervalo={args.interval}s | "
          f"horas/tick={config.simulated_hours_per_tick} | picos={config.spike_probability:.0%}")
    sim.start()
    try:
        while args.ticks <= 0 or sim.tick_count < args.ticks:
            time.sleep(min(0.5, config.tick_interval_seconds))
    except KeyboardInterrupt:
        print("\nEncerrado pelo usuário.")
    finally:
        sim.stop()

if __name__ == "__main__":
    main()
