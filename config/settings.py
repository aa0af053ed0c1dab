# configurações globais da simulação

SIMULATION_ENABLED = True

# parâmetros do laço de simulação (intervalos em ms, como no painel)
SIMULATION_SETTINGS = {
    'tick_interval_ms': 5000,          # 5 s de relógio por tick
    'simulated_hours_per_tick': 0.1,   # 6 min simulados por tick
    'variance_min': 0.8,               # ±20% de ruído no consumo
    'variance_max': 1.2,
    'alert_cooldown_ms': 60000,        # 1 min entre alertas iguais
    'spike_probability': 0.05,
    'spike_multiplier': 3.0,
    'spike_alert_threshold': 2.0,
}

# thresholds usados pelas entidades e pelo motor de alertas (% de enchimento)

LEVEL_THRESHOLDS = {
    'critical_pct': 5.0,
    'low_pct': 20.0,
    'healthy_pct': 90.0,
}

# horas até esvaziar (consumo linear)
PREDICTION_THRESHOLDS_HOURS = {
    'critical': 3.0,
    'high': 12.0,
    'medium': 24.0,
}

# histórico gerado para os gráficos
HISTORY_HOURS_BACK = 48
HISTORY_VARIANCE = (0.9, 1.1)
