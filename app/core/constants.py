## constantes da aplicação (planos, horários, status, mensagens)

APP_NAME = "AgendoPro"
APP_VERSION = "0.1.0"

# ----------------------------------------------------
# Horários base oferecidos para agendamento (manhã e tarde)
# ----------------------------------------------------
BASE_AVAILABLE_SLOTS = [
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "14:00", "14:30", "15:00", "15:30", "16:00", "16:30",
]

# status que ocupam um horário
BLOCKING_STATUSES = ("pending", "confirmed")

# ----------------------------------------------------
# Planos
# ----------------------------------------------------
UNLIMITED = -1
NEAR_LIMIT_RATIO = 0.8

PLAN_LIMITS = {
    "free": {
        "users": 1,
        "calendars": 1,
        "appointments_per_month": 50,
        "storage_mb": 100,
    },
    "basico": {
        "users": 3,
        "calendars": 2,
        "appointments_per_month": 200,
        "storage_mb": 500,
    },
    "profissional": {
        "users": 5,
        "calendars": UNLIMITED,
        "appointments_per_month": 1000,
        "storage_mb": 2000,
    },
    "premium": {
        "users": UNLIMITED,
        "calendars": UNLIMITED,
        "appointments_per_month": UNLIMITED,
        "storage_mb": 10000,
    },
}

PLAN_NAMES = {
    "free": "14 dias teste",
    "basico": "Básico",
    "profissional": "Profissional",
    "premium": "Premium",
}

# mensalidade em reais, usada nas estimativas de receita
PLAN_PRICES = {
    "free": 0.0,
    "basico": 49.90,
    "profissional": 129.90,
    "premium": 299.90,
}

# produto do checkout -> plano
PRODUCT_PLAN_MAP = {
    "agendopro-basico": "basico",
    "agendopro-profissional": "profissional",
    "agendopro-premium": "premium",
}

PAYMENT_APPROVED_EVENTS = ("sale_approved", "sale_confirmed")

# ----------------------------------------------------
# Usuários e permissões
# ----------------------------------------------------
USER_ROLES = ("superadmin", "admin", "staff", "client")

ROLE_PERMISSIONS = {
    "superadmin": [
        "manage_users",
        "view_reports",
        "manage_calendars",
        "view_all_appointments",
        "manage_settings",
        "view_audit_logs",
        "manage_appointments",
    ],
    "admin": [
        "manage_users",
        "view_reports",
        "manage_calendars",
        "view_all_appointments",
        "manage_appointments",
    ],
    "staff": ["manage_appointments"],
    "client": [],
}

MEDICAL_SERVICE_TYPES = ("medicina", "odontologia")

# ----------------------------------------------------
# Segurança
# ----------------------------------------------------
LOGIN_ATTEMPT_LIMIT = 5
LOGIN_LOCKOUT_SECONDS = 15 * 60
TEMPORARY_PASSWORD = "temp123456"

# ----------------------------------------------------
# Upload de arquivos (prontuários)
# ----------------------------------------------------
MAX_FILE_SIZE = 2 * 1024 * 1024
ALLOWED_FILE_TYPES = ("application/pdf", "image/png", "image/jpeg", "image/jpg")
MAX_FILES_PER_UPLOAD = 5

# ----------------------------------------------------
# Configurações do sistema
# ----------------------------------------------------
SETTING_CATEGORIES = ("general", "email", "security", "payment", "whatsapp", "appearance")
WHATSAPP_ENABLED_KEY = "whatsapp_enabled"
WHATSAPP_WEBHOOK_URL_KEY = "whatsapp_webhook_url"

ERROR_MESSAGES = {
    "UNAUTHORIZED": "Você não tem permissão para realizar esta ação.",
    "SLOT_UNAVAILABLE": "Já existe um agendamento para este horário. Por favor, escolha outro horário.",
}
