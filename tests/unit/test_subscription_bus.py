from src.domain.entities.alert import Alert
from src.infrastructure.events.subscription_bus import SubscriptionBus
from tests.unit.fakes import make_tank


def test_entrega_em_ordem_de_registro():
    bus = SubscriptionBus()
    calls = []
    bus.subscribe_tank_updates(lambda ts: calls.append(("a", len(ts))))
    bus.subscribe_tank_updates(lambda ts: calls.append(("b", len(ts))))
    bus.publish_tanks([make_tank("t1"), make_tank("t2")])
    assert calls == [("a", 2), ("b", 2)]


def test_cada_listener_recebe_copia():
    bus = SubscriptionBus()
    tanks = [make_tank("t1"), make_tank("t2")]
    seen = []
    bus.subscribe_tank_updates(lambda ts: ts.clear())
    bus.subscribe_tank_updates(lambda ts: seen.append(list(ts)))
    bus.publish_tanks(tanks)
    assert len(tanks) == 2
    assert len(seen[0]) == 2


def test_cancelar_durante_entrega_vale_so_na_proxima():
    bus = SubscriptionBus()
    calls = []
    handles = {}

    def first(ts):
        calls.append("first")
        handles["second"]()  # cancela o segundo no meio da rodada

    handles["first"] = bus.subscribe_tank_updates(first)
    handles["second"] = bus.subscribe_tank_updates(lambda ts: calls.append("second"))

    bus.publish_tanks([make_tank()])
    assert calls == ["first", "second"]
    bus.publish_tanks([make_tank()])
    assert calls == ["first", "second", "first"]
    assert bus.tank_listener_count == 1


def test_cancelar_duas_vezes_e_noop():
    bus = SubscriptionBus()
    h = bus.subscribe_alerts(lambda a: None)
    h()
    h.cancel()
    assert h.active is False
    assert bus.alert_listener_count == 0


def test_listener_com_erro_nao_bloqueia_os_demais():
    bus = SubscriptionBus()
    got = []

    def broken(alert):
        raise RuntimeError("boom")

    bus.subscribe_alerts(broken)
    bus.subscribe_alerts(got.append)
    alert = Alert.refill("t1", "A", "alert-1")
    bus.publish_alert(alert)
    assert got == [alert]
