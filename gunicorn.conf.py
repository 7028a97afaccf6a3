"""Gunicorn config for deployment."""
import os

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Uvicorn async workers. Sessions live in worker memory, so a download must
# reach the worker that processed it: keep one worker unless requests are
# pinned. Tune via WEB_CONCURRENCY env var.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

# Timeout: processing the full regional catalog takes a few seconds
timeout = 60

# Graceful timeout for shutdown
graceful_timeout = 30

# Idle keep-alive seconds; matches uvicorn timeout_keep_alive in cli.py serve
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
