from enum import Enum

# =====================================================
# 📋 TAREAS
# =====================================================
class TaskStatusEnum(str, Enum):
    PENDIENTE = "Pendiente"
    EN_PROGRESO = "En progreso"
    COMPLETADA = "Completada"


class TaskPriorityEnum(str, Enum):
    BAJA = "Baja"
    MEDIA = "Media"
    ALTA = "Alta"


DEFAULT_TASK_TYPE = "Mantenimiento"
FEEDING_TASK_TYPE = "Alimentación"


# =====================================================
# 💰 FINANZAS
# =====================================================
class MovementTypeEnum(str, Enum):
    INGRESO = "Ingreso"
    GASTO = "Gasto"


# =====================================================
# 💡 SUGERENCIAS
# =====================================================
class SuggestionLevelEnum(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"
