# run.py - Painel AquaMind
# =============================================================================
# HOME: KPIs + tanques em 2 colunas (cards) com botão de reabastecer
# ALERTAS: lista de alertas da sessão (resolver / apagar) + contagem por severidade
# TANQUE: histórico de nível (plotly) + dados do tanque
# Datas/horas "DD/MM HH:MM"
# =============================================================================

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st
from numpy.random import default_rng

from config.settings import LEVEL_THRESHOLDS, SIMULATION_ENABLED, SIMULATION_SETTINGS
from src.domain.entities.tank import Tank
from src.domain.enums import TankStatus
from src.domain.use_cases.calculate_kpis_use_case import CalculateKPIsUseCase
from src.domain.use_cases.generate_history_use_case import GenerateHistoryUseCase
from src.infrastructure.memory.alert_log import InMemoryAlertLog
from src.infrastructure.sensors.tank_simulator import (
    SimulationProvider, load_seed_tanks, start_with_alert_log,
)

st.set_page_config(page_title="AquaMind - Tanques", layout="wide")

# =============================================================================
# ROTAS
# =============================================================================
ROUTES = ("home", "tank", "alerts")
# a rota também vai para a URL: o auto-refresh (meta refresh) abre uma sessão nova
if "route" not in st.session_state:
    st.session_state.route = st.query_params.get("route", "home")
    if st.session_state.route not in ROUTES:
        st.session_state.route = "home"
    if "tank_id" in st.query_params:
        st.session_state.param_tank_id = st.query_params["tank_id"]

def navigate(to: str, **params):
    st.session_state.route = to
    st.query_params["route"] = to
    for k, v in params.items():
        st.session_state[f"param_{k}"] = v
        st.query_params[k] = v
    st.rerun()

# =============================================================================
# SIMULAÇÃO (uma por processo do streamlit)
# =============================================================================
@st.cache_resource(show_spinner=False)
def get_runtime() -> Dict[str, Any]:
    provider = SimulationProvider()
    sim, alert_log = start_with_alert_log(provider, load_seed_tanks(), autostart=SIMULATION_ENABLED)
    return {"provider": provider, "sim": sim, "alerts": alert_log}

runtime = get_runtime()
sim = runtime["sim"]
alert_log: InMemoryAlertLog = runtime["alerts"]

STATUS_COLOR = {
    TankStatus.HEALTHY: "#22c55e",
    TankStatus.LOW: "#f59e0b",
    TankStatus.CRITICAL: "#ef4444",
    TankStatus.MAINTENANCE: "#64748b",
}
SEVERITY_LABEL = {"low": "Baixa", "medium": "Média", "high": "Alta", "critical": "Crítica"}
TYPE_LABEL = {"level": "Nível", "usage": "Consumo", "prediction": "Previsão", "maintenance": "Manutenção"}

def fmt_ts(ts) -> str:
    try:
        return pd.to_datetime(ts, utc=True).tz_convert(None).strftime("%d/%m %H:%M")
    except (TypeError, ValueError):
        return "—"

def fmt_eta(hours: float) -> str:
    return "—" if hours == float("inf") else f"{hours:.1f} h"

@st.cache_data(ttl=30, show_spinner=False)
def get_history(tank_id: str, current: float, capacity: float, rate: float) -> pd.DataFrame:
    # reconstrói o histórico a partir do estado atual (cache curto para não oscilar a cada rerun)
    tank = sim.get_tank(tank_id)
    return GenerateHistoryUseCase(default_rng()).execute(tank).to_frame()

# =============================================================================
# PÁGINAS
# =============================================================================
def page_home(tanks: List[Tank]):
    kpis = CalculateKPIsUseCase().execute(tanks).summary
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Água armazenada", f"{kpis['total_water_stored']:,.0f} L",
              f"{kpis['utilization_percentage']}% da capacidade")
    c2.metric("Consumo diário médio", f"{kpis['avg_daily_consumption']:,} L")
    c3.metric("Próximo reabastecimento", "—" if kpis["next_refill_eta_hours"] is None
              else f"{kpis['next_refill_eta_hours']} h")
    c4.metric("Críticos / baixos", f"{kpis['critical_tank_count']} / {kpis['low_tank_count']}")

    fig = go.Figure(go.Bar(
        x=[t.name for t in tanks],
        y=[t.fill_percentage for t in tanks],
        marker_color=[STATUS_COLOR[t.status] for t in tanks],
    ))
    fig.add_hline(y=LEVEL_THRESHOLDS["low_pct"], line_dash="dot", line_color="#f59e0b")
    fig.add_hline(y=LEVEL_THRESHOLDS["critical_pct"], line_dash="dot", line_color="#ef4444")
    fig.update_layout(height=260, margin=dict(l=10, r=10, t=10, b=10), yaxis_title="%", yaxis_range=[0, 100])
    st.plotly_chart(fig, use_container_width=True)

    cols = st.columns(2, gap="large")
    for idx, t in enumerate(tanks):
        with cols[idx % 2]:
            with st.container(border=True):
                st.markdown(
                    f"**{t.name}** &nbsp; <span style='color:{STATUS_COLOR[t.status]}'>● {t.status.value}</span>",
                    unsafe_allow_html=True,
                )
                st.caption(f"{t.location or '—'} • {'Comunitário' if t.is_community else t.owner}")
                st.progress(min(1.0, t.fill_percentage / 100.0),
                            text=f"{t.current_liters:,.0f} / {t.capacity_liters:,.0f} L ({t.fill_percentage:.1f}%)")
                st.caption(f"Consumo médio {t.avg_consumption_lph} L/h • vazio em {fmt_eta(t.hours_to_empty)} "
                           f"• último reabastecimento {fmt_ts(t.last_refill)}")
                b1, b2 = st.columns(2)
                if b1.button("Reabastecer", key=f"refill_{t.tank_id}", use_container_width=True):
                    sim.refill_tank(t.tank_id)
                    st.toast(f"{t.name} reabastecido.")
                    st.rerun()
                if b2.button("Abrir", key=f"open_{t.tank_id}", use_container_width=True):
                    navigate("tank", tank_id=t.tank_id)

def page_tank(tank_id: str):
    t = sim.get_tank(tank_id)
    if t is None:
        st.warning("Tanque não encontrado.")
        return
    st.subheader(t.name)
    c1, c2, c3 = st.columns(3)
    c1.metric("Nível", f"{t.fill_percentage:.1f}%")
    c2.metric("Volume", f"{t.current_liters:,.0f} L")
    c3.metric("Vazio em", fmt_eta(t.hours_to_empty))

    df = get_history(t.tank_id, round(t.current_liters, -1), t.capacity_liters, t.avg_consumption_lph)
    fig = px.line(df, x="timestamp", y="liters", markers=True, labels={"liters": "Litros", "timestamp": ""})
    fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True)

    maint = t.status is TankStatus.MAINTENANCE
    if st.toggle("Em manutenção", value=maint, key=f"maint_{t.tank_id}") != maint:
        sim.set_maintenance(t.tank_id, enabled=not maint)
        st.rerun()

    st.markdown("**Alertas em aberto**")
    open_alerts = alert_log.list_open_by_tank(t.tank_id)
    if not open_alerts:
        st.info("Nenhum alerta em aberto.")
    for a in reversed(open_alerts):
        st.write(f"{fmt_ts(a.created_at)} · [{SEVERITY_LABEL[a.severity.value]}] {a.message}")

def page_alerts():
    stats = alert_log.stats()
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total", stats["total"])
    c2.metric("Em aberto", stats["open"])
    c3.metric("Críticos", stats["by_severity"].get("critical", 0))
    c4.metric("Altos", stats["by_severity"].get("high", 0))

    alerts = alert_log.list_recent(200)
    if not alerts:
        st.info("Nenhum alerta emitido nesta sessão.")
        return
    for a in alerts:
        with st.container(border=True):
            col_txt, col_r, col_d = st.columns([6, 1, 1])
            status = "resolvido" if a.resolved else "aberto"
            col_txt.write(f"{fmt_ts(a.created_at)} · {TYPE_LABEL[a.type.value]} · "
                          f"{SEVERITY_LABEL[a.severity.value]} · {status}")
            col_txt.caption(a.message)
            if not a.resolved and col_r.button("Resolver", key=f"res_{a.id}"):
                alert_log.resolve(a.id)
                st.rerun()
            if col_d.button("Apagar", key=f"del_{a.id}"):
                alert_log.delete(a.id)
                st.rerun()

# =============================================================================
# SIDEBAR
# =============================================================================
tanks = sim.get_tanks()
st.sidebar.header("AquaMind")
for label, route in (("Tanques", "home"), ("Alertas", "alerts")):
    if st.sidebar.button(label, key=f"nav_{route}", use_container_width=True):
        navigate(route)

tank_options = {f"{t.tank_id} · {t.name}": t.tank_id for t in tanks}
tank_label = st.sidebar.selectbox("Selecionar tanque", list(tank_options.keys()))
if st.sidebar.button("Ver tanque", use_container_width=True):
    navigate("tank", tank_id=tank_options[tank_label])

col_sim1, col_sim2 = st.sidebar.columns(2)
if col_sim1.button("Iniciar", use_container_width=True, disabled=sim.is_running):
    sim.start()
    st.rerun()
if col_sim2.button("Pausar", use_container_width=True, disabled=not sim.is_running):
    sim.stop()
    st.rerun()

auto = st.sidebar.toggle("Auto-refresh", value=False, help="Atualiza a cada tick da simulação")
if auto:
    secs = max(1, SIMULATION_SETTINGS["tick_interval_ms"] // 1000)
    st.write(f"<meta http-equiv='refresh' content='{secs}'>", unsafe_allow_html=True)

st.sidebar.caption(
    f"Simulação: {'rodando' if sim.is_running else 'parada'} · ticks={sim.tick_count} · "
    f"{SIMULATION_SETTINGS['simulated_hours_per_tick'] * 60:.0f} min simulados por tick"
)

# =============================================================================
# DISPATCHER
# =============================================================================
route = st.session_state.route
if route == "alerts":
    page_alerts()
elif route == "tank":
    page_tank(st.session_state.get("param_tank_id", tanks[0].tank_id))
else:
    page_home(tanks)
