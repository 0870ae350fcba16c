from pathlib import Path

from celery.schedules import crontab
from decouple import Csv, config

# -------------------------------
# Diretórios base
# -------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

# -------------------------------
# Segurança e debug
# -------------------------------
SECRET_KEY = config('SECRET_KEY', default='dev-insecure-secret-key')
DEBUG = config('DEBUG', default=False, cast=bool)
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())

# -------------------------------
# Cookies & CSRF
# -------------------------------
SESSION_COOKIE_SECURE   = config('SESSION_COOKIE_SECURE', default=False, cast=bool) # Desenvolvido para HTTPS
SESSION_COOKIE_HTTPONLY = config('SESSION_COOKIE_HTTPONLY', default=True, cast=bool)
SESSION_COOKIE_SAMESITE = config('SESSION_COOKIE_SAMESITE', default='Lax')
CSRF_COOKIE_SECURE      = config('CSRF_COOKIE_SECURE', default=False, cast=bool) # Desenvolvido para HTTPS
CSRF_COOKIE_HTTPONLY    = config('CSRF_COOKIE_HTTPONLY', default=True, cast=bool)
CSRF_COOKIE_SAMESITE    = config('CSRF_COOKIE_SAMESITE', default='Lax')

AUTH_COOKIE_NAME     = config('AUTH_COOKIE_NAME', default='authToken')
AUTH_COOKIE_SECURE   = config('AUTH_COOKIE_SECURE', default=False, cast=bool) # Desenvolvido para HTTPS
AUTH_COOKIE_HTTPONLY = config('AUTH_COOKIE_HTTPONLY', default=True, cast=bool)
AUTH_COOKIE_SAMESITE = config('AUTH_COOKIE_SAMESITE', default='Lax')

SECURE_SSL_REDIRECT          = config('SECURE_SSL_REDIRECT', default=False, cast=bool)
SECURE_HSTS_SECONDS          = config('SECURE_HSTS_SECONDS', default=31536000, cast=int)
SECURE_HSTS_INCLUDE_SUBDOMAINS = config('SECURE_HSTS_INCLUDE_SUBDOMAINS', default=True, cast=bool)
SECURE_HSTS_PRELOAD          = config('SECURE_HSTS_PRELOAD', default=True, cast=bool)
SECURE_PROXY_SSL_HEADER      = ('HTTP_X_FORWARDED_PROTO', 'https')

# -------------------------------
# CORS (preflight das funções vem do corsheaders)
# -------------------------------
CORS_ALLOW_ALL_ORIGINS = config('CORS_ALLOW_ALL_ORIGINS', default=False, cast=bool)
CORS_ALLOW_CREDENTIALS = config('CORS_ALLOW_CREDENTIALS', default=True, cast=bool)
CSRF_TRUSTED_ORIGINS  = config('CSRF_TRUSTED_ORIGINS', default='http://localhost:5173', cast=Csv())
CORS_ALLOWED_ORIGINS   = config('CORS_ALLOWED_ORIGINS',   default='http://localhost:5173', cast=Csv())
CORS_ALLOW_METHODS     = config('CORS_ALLOW_METHODS',     default='GET,POST,PUT,PATCH,DELETE,OPTIONS', cast=Csv())
CORS_ALLOW_HEADERS     = config(
    'CORS_ALLOW_HEADERS',
    default='Authorization,Content-Type,X-CSRFToken,X-Client-Info,Apikey',
    cast=Csv(),
)

# -------------------------------
# Redis / Cache
# -------------------------------
REDIS_URL = config('REDIS_URL', default='redis://localhost:6379/0')
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": config('CACHE_URL', default='redis://localhost:6379/1'),
    }
}

# -------------------------------
# Celery
# -------------------------------
CELERY_BROKER_URL                 = config("CELERY_BROKER_URL", default=REDIS_URL)
CELERY_RESULT_BACKEND             = config('CELERY_RESULT_BACKEND', default=REDIS_URL)
CELERY_TASK_ACKS_LATE             = True
CELERY_TASK_REJECT_ON_WORKER_LOST = True
CELERY_WORKER_PREFETCH_MULTIPLIER = 1
CELERY_TASK_ALWAYS_EAGER          = config('CELERY_TASK_ALWAYS_EAGER', default=False, cast=bool)
CELERY_ACCEPT_CONTENT             = ["json"]
CELERY_TASK_SERIALIZER            = "json"
CELERY_TASK_QUEUES = {
    "default":      {"exchange": "default",      "routing_key": "default"},
    "dead_letter":  {"exchange": "dead_letter",  "routing_key": "dead_letter"},
    "payment":      {"exchange": "payment",      "routing_key": "payment"},
    "registry":     {"exchange": "registry",     "routing_key": "registry"},
    "signature":    {"exchange": "signature",    "routing_key": "signature"},
}
CELERY_TASK_DEFAULT_QUEUE = 'default'
CELERY_TASK_DEFAULT_EXCHANGE = 'default'
CELERY_TASK_DEFAULT_ROUTING_KEY = 'default'

# --- AGENDADOR (CELERY BEAT) ---
CELERY_BEAT_SCHEDULER = 'django_celery_beat.schedulers:DatabaseScheduler'

CELERY_BEAT_SCHEDULE = {
    # Reenvia adesões que falharam no RMS a cada 30 minutos.
    'retry-registry-adhesions': {
        'task': 'medpass_api.tasks.retry_registry_adhesions',
        'schedule': crontab(minute='*/30'),
    },
    # Consulta o gateway para cobranças ainda pendentes.
    'refresh-payment-statuses': {
        'task': 'medpass_api.tasks.refresh_payment_statuses',
        'schedule': crontab(minute=15, hour='*/2'),
    },
    # Reaplica webhooks que ficaram com erro.
    'reprocess-webhook-events': {
        'task': 'medpass_api.tasks.reprocess_webhook_events',
        'schedule': crontab(minute=45),
    },
}

# -------------------------------
# Vindi (gateway de pagamento)
# -------------------------------
VINDI_API_KEY         = config('VINDI_API_KEY', default='')
VINDI_ENVIRONMENT     = config('VINDI_ENVIRONMENT', default='sandbox')
VINDI_TIMEOUT         = config('VINDI_TIMEOUT', default=30, cast=int)
VINDI_WEBHOOK_SECRET  = config('VINDI_WEBHOOK_SECRET', default='')
PAYMENT_LINK_BASE_URL = config('PAYMENT_LINK_BASE_URL', default='http://localhost:5173/pagamento')

# -------------------------------
# RMS (registro de beneficiários)
# Fallback quando a chave não está na tabela ApiSetting.
# -------------------------------
RMS_API_KEY                    = config('RMS_API_KEY', default='')
RMS_ADESAO_URL                 = config('RMS_ADESAO_URL', default='')
RMS_CANCELAMENTO_URL           = config('RMS_CANCELAMENTO_URL', default='')
RMS_CONSULTA_BENEFICIARIOS_URL = config('RMS_CONSULTA_BENEFICIARIOS_URL', default='')
RMS_ID_CLIENTE                 = config('RMS_ID_CLIENTE', default='')
RMS_ID_CLIENTE_CONTRATO        = config('RMS_ID_CLIENTE_CONTRATO', default='')
RMS_TIMEOUT                    = config('RMS_TIMEOUT', default=30, cast=int)
REGISTRY_MAX_RETRIES           = config('REGISTRY_MAX_RETRIES', default=5, cast=int)

# -------------------------------
# Autentique (assinatura eletrônica)
# -------------------------------
AUTENTIQUE_API_KEY = config('AUTENTIQUE_API_KEY', default='')

# -------------------------------
# Brevo (e-mail transacional)
# -------------------------------
BREVO_API_KEY      = config('BREVO_API_KEY', default='')
DEFAULT_FROM_EMAIL = config('DEFAULT_FROM_EMAIL', default='MedPass <nao-responda@medpass.com.br>')

# -------------------------------
# JWT
# -------------------------------
JWT_SECRET     = config('JWT_SECRET', default=SECRET_KEY)
JWT_ALGORITHM  = config('JWT_ALGORITHM', default='HS256')
JWT_EXPIRES_IN = config('JWT_EXPIRES_IN', default=60 * 60 * 8, cast=int)

# -------------------------------
# Logs
# -------------------------------
JSON_LOGS = config('JSON_LOGS', default=False, cast=bool)
LOG_LEVEL = config('LOG_LEVEL', default='INFO')

# -------------------------------
# Apps, Middleware, URLs
# -------------------------------
INSTALLED_APPS = [
    'corsheaders',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'drf_yasg',
    'django_prometheus',
    'django_celery_beat',
    'plugins.django_interface.apps.DjangoInterfaceConfig',
    'medpass_api.apps.MedpassConfig',
]

MIDDLEWARE = [
    'django_prometheus.middleware.PrometheusBeforeMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'plugins.django_interface.request_middleware.RequestContextMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django_prometheus.middleware.PrometheusAfterMiddleware',
]

ROOT_URLCONF = 'medpass_api.urls'
WSGI_APPLICATION = 'medpass_api.wsgi.application'
ASGI_APPLICATION = 'medpass_api.asgi.application'

# -------------------------------
# Templates
# -------------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# -------------------------------
# REST Framework
# -------------------------------
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "medpass_core.adapters.security.jwt_authentication.JWTAuthentication",
        "medpass_core.adapters.security.jwt_authentication.CookieJWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "EXCEPTION_HANDLER": "plugins.django_interface.exception_handler.domain_exception_handler",
}
SWAGGER_SETTINGS = {
    'SECURITY_DEFINITIONS': {
        'Bearer': {
            'type': 'apiKey', 'name': 'Authorization', 'in': 'header'
        }
    },
}

# -------------------------------
# Banco de Dados
# -------------------------------
DATABASES = {
    'default': {
        'ENGINE':   'django_prometheus.db.backends.postgresql',
        'NAME':     config('DB_NAME', default='medpass'),
        'USER':     config('DB_USER', default='medpass'),
        'PASSWORD': config('DB_PASS', default='medpass'),
        'HOST':     config('DB_HOST', default='localhost'),
        'PORT':     config('DB_PORT', default='5432'),
    }
}

# -------------------------------
# Internacionalização
# -------------------------------
LANGUAGE_CODE = 'pt-br'
TIME_ZONE     = 'America/Sao_Paulo'
USE_I18N      = True
USE_TZ        = True

# -------------------------------
# Arquivos estáticos
# -------------------------------
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
