"""Settings de teste: SQLite em memória, cache local e Celery síncrono."""
from config.settings import *  # noqa: F403

DEBUG = False
SECRET_KEY = "test-secret-key"
JWT_SECRET = "test-jwt-secret"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "medpass-tests",
    }
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
CELERY_BEAT_SCHEDULER = "celery.beat:PersistentScheduler"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

# chaves fictícias: as chamadas HTTP são sempre substituídas por fakes
VINDI_API_KEY = "test-vindi-key"
VINDI_ENVIRONMENT = "sandbox"
VINDI_WEBHOOK_SECRET = ""
AUTENTIQUE_API_KEY = "test-autentique-key"
BREVO_API_KEY = "test-brevo-key"
RMS_API_KEY = "test-rms-key"
RMS_ADESAO_URL = "https://rms.test/adesao"
RMS_CANCELAMENTO_URL = "https://rms.test/cancelamento"
RMS_CONSULTA_BENEFICIARIOS_URL = "https://rms.test/beneficiarios"
RMS_ID_CLIENTE = "10"
RMS_ID_CLIENTE_CONTRATO = "20"
PAYMENT_LINK_BASE_URL = "https://app.test/pagamento"
