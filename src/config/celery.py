"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events do ciclo de venda após o commit
- Notificações ao comprador e à equipe comercial

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    celery -A src.config.celery worker -l INFO -Q events,notifications
"""

import os
from celery import Celery
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('concessionaria')

# Configurações CELERY_* vindas das settings do Django
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',

    timezone='America/Sao_Paulo',
    enable_utc=True,

    task_acks_late=True,  # ACK após execução (mais seguro)
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    worker_send_task_events=True,
    task_send_sent_event=True,
)

# Filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
)
app.conf.task_default_queue = 'default'

# Roteamento: dispatcher na fila de eventos, handlers na de notificações
app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.dispatch_domain_event': {'queue': 'events'},
    'src.adapters.django_app.events.handlers.handle_*': {'queue': 'notifications'},
}

app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')
