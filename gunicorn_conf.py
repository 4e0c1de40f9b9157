import multiprocessing
import os

# Gunicorn config for the storefront API via UvicornWorker:
#   gunicorn -c gunicorn_conf.py app.main:app

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
worker_class = "uvicorn.workers.UvicornWorker"

# Handlers are stateless; every worker builds its own Supabase client on first use.
workers = int(os.getenv("WEB_CONCURRENCY", str(max(2, multiprocessing.cpu_count()))))
threads = int(os.getenv("GUNICORN_THREADS", "1"))

# Store round-trips are short; a stuck request is cut off by the worker timeout.
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "20"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = None  # RequestLoggingMiddleware writes the access line
errorlog = "-"
