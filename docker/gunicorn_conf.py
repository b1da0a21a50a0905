import multiprocessing
import os

wsgi_app = "foodmacros.main:app"
bind = f"0.0.0.0:{os.getenv('PORT','8000')}"
workers = int(os.getenv("WEB_CONCURRENCY", str(multiprocessing.cpu_count()))) or 1
worker_class = "uvicorn.workers.UvicornWorker"
# Upstream LLM calls are slow; keep the worker timeout above OPENAI_TIMEOUT
timeout = int(os.getenv("TIMEOUT", "90"))
keepalive = 5
graceful_timeout = 30
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
