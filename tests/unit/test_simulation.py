import threading
import time

import pytest
from numpy.random import default_rng

from src.domain.enums import AlertType, Severity, TankStatus
from src.domain.errors import ConfigurationError
from src.domain.value_objects import SimulationConfig
from src.infrastructure.events.subscription_bus import SubscriptionBus
from src.infrastructure.sensors import tank_simulator as sim_mod
from src.infrastructure.sensors.tank_simulator import (
    SimulationProvider, TankSimulation, load_seed_tanks, start_simulation, start_with_alert_log,
)
from tests.unit.fakes import FixedRng, make_tank


@pytest.fixture
def sim(clock):
    tanks = [
        make_tank("t1", capacity=1000, current=1000, rate=100),
        make_tank("t2", capacity=1000, current=40, rate=10, status=TankStatus.CRITICAL),
    ]
    s = TankSimulation(tanks, rng=FixedRng(), clock=clock)
    yield s
    s.stop()


def _threads(s):
    return [t for t in threading.enumerate() if t.name == f"tank-simulation-{id(s):x}"]


def test_um_tick_cenario_1000_litros(clock):
    for fraction, expected in ((0.0, 992.0), (1.0, 988.0)):
        s = TankSimulation([make_tank(rate=100)], rng=FixedRng(fraction=fraction), clock=clock)
        s.tick()
        t = s.get_tank("t1")
        assert t.current_liters == pytest.approx(expected)
        assert t.status is TankStatus.HEALTHY


def test_tanque_em_4_porcento_fica_critico_e_alerta(sim):
    alerts = sim.tick()
    assert sim.get_tank("t2").status is TankStatus.CRITICAL
    assert any(a.tank_id == "t2" and (a.type, a.severity) == (AlertType.LEVEL, Severity.CRITICAL)
               for a in alerts)


def test_invariantes_com_gerador_real():
    s = TankSimulation(load_seed_tanks(), SimulationConfig(simulated_hours_per_tick=5.0), rng=default_rng(7))
    for _ in range(60):
        s.tick()
        for t in s.get_tanks():
            assert 0 <= t.current_liters <= t.capacity_liters
            if t.fill_percentage <= 5:
                assert t.status is TankStatus.CRITICAL
            if t.fill_percentage >= 90:
                assert t.status is TankStatus.HEALTHY


def test_snapshot_antes_dos_alertas(sim):
    events = []
    sim.subscribe_tank_updates(lambda ts: events.append(("tanks", [t.current_liters for t in ts])))
    sim.subscribe_alerts(lambda a: events.append(("alert", a.id)))
    sim.tick()
    assert events[0][0] == "tanks"
    assert len(events[0][1]) == 2
    assert [e[0] for e in events[1:]] == ["alert"] * (len(events) - 1)
    assert len(events) > 1


def test_snapshot_entregue_e_copia(sim):
    sim.subscribe_tank_updates(lambda ts: ts.clear())
    sim.tick()
    assert len(sim.get_tanks()) == 2
    sim.get_tanks().clear()
    assert len(sim.get_tanks()) == 2


def test_refill_sempre_emite_um_alerta(sim, clock):
    got = []
    sim.subscribe_alerts(got.append)
    sim.tick()
    got.clear()

    for _ in range(2):  # mesmo dentro da janela de cooldown
        alert = sim.refill_tank("t2")
        t = sim.get_tank("t2")
        assert t.current_liters == t.capacity_liters
        assert t.status is TankStatus.HEALTHY
        assert t.last_refill == clock()
        assert (alert.type, alert.severity) == (AlertType.MAINTENANCE, Severity.LOW)
    assert len(got) == 2


def test_refill_de_tanque_desconhecido_e_noop(sim):
    before = sim.get_tanks()
    assert sim.refill_tank("nao-existe") is None
    assert sim.get_tanks() == before


def test_manutencao_persiste_ate_refill(sim):
    sim.set_maintenance("t2")
    sim.tick()
    assert sim.get_tank("t2").status is TankStatus.MAINTENANCE
    sim.refill_tank("t2")
    assert sim.get_tank("t2").status is TankStatus.HEALTHY
    assert sim.set_maintenance("nao-existe") is None


def test_cancelar_assinatura_no_meio_da_sessao(sim):
    a, b = [], []
    handle = sim.subscribe_tank_updates(a.append)
    sim.subscribe_tank_updates(b.append)
    sim.tick()
    handle()
    sim.tick()
    assert len(a) == 1
    assert len(b) == 2


def test_falha_em_um_tanque_nao_para_o_tick(sim, monkeypatch):
    original = sim.alert_engine.execute

    def flaky(tank):
        if tank.tank_id == "t1":
            raise RuntimeError("dado ruim")
        return original(tank)

    monkeypatch.setattr(sim.alert_engine, "execute", flaky)
    snapshots = []
    sim.subscribe_tank_updates(snapshots.append)
    alerts = sim.tick()
    assert len(snapshots) == 1
    assert any(a.tank_id == "t2" for a in alerts)
    assert sim.tick_count == 1


def test_start_idempotente_e_stop(clock):
    s = TankSimulation([make_tank()], SimulationConfig(tick_interval_ms=10), rng=FixedRng(), clock=clock)
    ticked = threading.Event()
    s.subscribe_tank_updates(lambda ts: ticked.set())
    assert s.start() is s
    s.start()
    assert s.is_running
    assert len(_threads(s)) == 1
    assert ticked.wait(2.0)
    s.stop()
    s.stop()
    assert not s.is_running
    assert _threads(s) == []
    count = s.tick_count
    time.sleep(0.05)
    assert s.tick_count == count


def test_start_duplicado_nao_acelera_os_ticks(clock):
    s = TankSimulation([make_tank()], SimulationConfig(tick_interval_ms=50), rng=FixedRng(), clock=clock)
    s.start()
    s.start()
    s.start()
    time.sleep(0.5)
    s.stop()
    # um único timer de 50 ms faz no máximo 10 ticks em 0.5 s
    assert 1 <= s.tick_count <= 11


def test_agendador_sobrevive_a_tick_com_falha(clock, monkeypatch):
    s = TankSimulation([make_tank()], SimulationConfig(tick_interval_ms=10), rng=FixedRng(), clock=clock)
    real_tick = s.tick
    calls = []
    ticked = threading.Event()

    def flaky_tick():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("falha no tick")
        result = real_tick()
        ticked.set()
        return result

    monkeypatch.setattr(s, "tick", flaky_tick)
    s.start()
    try:
        assert ticked.wait(2.0)
    finally:
        s.stop()
    assert len(calls) >= 2
    assert s.tick_count >= 1


def test_stop_chamado_por_listener(clock):
    s = TankSimulation([make_tank()], SimulationConfig(tick_interval_ms=10), rng=FixedRng(), clock=clock)
    done = threading.Event()

    def stop_me(ts):
        s.stop()
        done.set()

    s.subscribe_tank_updates(stop_me)
    s.start()
    assert done.wait(2.0)
    assert not s.is_running


def test_sem_tanques_e_erro_de_configuracao():
    with pytest.raises(ConfigurationError):
        TankSimulation([])
    with pytest.raises(ConfigurationError):
        SimulationProvider().get()


def test_provider_reaproveita_instancia():
    provider = SimulationProvider(rng=FixedRng())
    s = provider.get([make_tank()])
    assert provider.get() is s
    assert provider.start() is s
    provider.stop()
    assert not s.is_running


def test_start_simulation_aceita_dicts(monkeypatch):
    monkeypatch.setattr(sim_mod, "default_rng", lambda seed=None: FixedRng())
    s = start_simulation([make_tank().to_dict()], SimulationConfig(tick_interval_ms=60000))
    try:
        assert s.is_running
        assert s.get_tanks()[0].tank_id == "t1"
    finally:
        s.stop()


class _RecordingBus(SubscriptionBus):
    """Anota se a simulação já rodava quando o log de alertas foi assinado."""

    def __init__(self, provider_ref):
        super().__init__()
        self.provider_ref = provider_ref
        self.running_at_subscribe = None

    def subscribe_alerts(self, callback):
        self.running_at_subscribe = self.provider_ref[0].get().is_running
        return super().subscribe_alerts(callback)


def test_log_de_alertas_assinado_antes_do_start():
    ref = []
    bus = _RecordingBus(ref)
    provider = SimulationProvider(SimulationConfig(tick_interval_ms=10), rng=FixedRng(), bus=bus)
    ref.append(provider)
    critical = make_tank(current=40, rate=10, status=TankStatus.CRITICAL)
    sim, alert_log = start_with_alert_log(provider, [critical])
    try:
        assert bus.running_at_subscribe is False
        assert sim.is_running
        deadline = time.time() + 2.0
        while len(alert_log) == 0 and time.time() < deadline:
            time.sleep(0.01)
    finally:
        provider.stop()
    assert alert_log.list_open_by_tank("t1")[0].type is AlertType.LEVEL


def test_log_de_alertas_sem_autostart():
    provider = SimulationProvider(rng=FixedRng())
    sim, alert_log = start_with_alert_log(provider, [make_tank()], autostart=False)
    assert not sim.is_running
    assert sim.bus.alert_listener_count() == 1
    sim.refill_tank("t1")
    assert len(alert_log) == 1
