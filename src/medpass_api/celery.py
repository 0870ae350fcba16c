import os

from celery import Celery

# Define o módulo de configurações do Django para o Celery.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('medpass_api')

# Todas as configurações do Celery começam com CELERY_ (ex: CELERY_BROKER_URL).
app.config_from_object('django.conf:settings', namespace='CELERY')

# Procura `tasks.py` em todos os apps de INSTALLED_APPS.
app.autodiscover_tasks()
