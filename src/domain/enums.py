from enum import Enum

class TankStatus(Enum):
    """Estado do tanque derivado do nível (ou definido manualmente)."""
    HEALTHY = "healthy"          # Nível confortável
    LOW = "low"                  # Abaixo de 20%: reabastecer em breve
    CRITICAL = "critical"        # Abaixo de 5%: ação imediata
    MAINTENANCE = "maintenance"  # Override manual, nunca atribuído pelo classificador

class Severity(Enum):
    """Nível de severidade dos alertas."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

class AlertType(Enum):
    """Categoria/origem do alerta."""
    LEVEL = "level"              # Nível atual abaixo dos limiares
    USAGE = "usage"              # Pico de consumo (possível vazamento)
    PREDICTION = "prediction"    # Previsão de esvaziamento
    MAINTENANCE = "maintenance"  # Ações administrativas (reabastecimento)
