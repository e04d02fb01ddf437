# gunicorn.conf.py
import os

wsgi_app = "blobcheck.main:app"
bind = f"0.0.0.0:{os.getenv('BLOBCHECK_PORT', '3000')}"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
worker_class = "uvicorn.workers.UvicornWorker"
preload_app = False
# grote uploads: geen worker-timeout halverwege een body van 100 MiB
timeout = 300
graceful_timeout = 30
keepalive = 5
accesslog = "-"
errorlog = "-"
loglevel = "info"
