import os

bind = f"0.0.0.0:{os.getenv('PORT', 8000)}"
worker_class = "uvicorn.workers.UvicornWorker"

# Every worker runs its own APScheduler when ENABLE_SCHEDULER is on, and its own
# snapshot cache; run more than one only with the scheduler disabled
workers = int(os.getenv('WEB_CONCURRENCY', 1))
preload_app = False

# Scanning stations retry on 503; slow requests are usually a held row lock
timeout = int(os.getenv('GUNICORN_TIMEOUT', 30))
graceful_timeout = 20
keepalive = 5

loglevel = os.getenv('LOG_LEVEL', 'info').lower()
accesslog = "-"

wsgi_app = "campcheck.main:app"
