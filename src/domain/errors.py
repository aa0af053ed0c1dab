class ConfigurationError(ValueError):
    """Uso da simulação antes de ela ter sido configurada (sem tanques iniciais)."""
