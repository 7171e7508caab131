"""
Gunicorn configuration for production deployment
Async workers via Uvicorn; sizing is driven by environment variables
"""
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 100

# Worker lifecycle
max_requests = 1000  # Recycle workers periodically
max_requests_jitter = 100

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "itcommunity_api"

# Server mechanics
daemon = False  # Docker handles process supervision
pidfile = None

# Logging
accesslog = "-"  # Log to stdout
errorlog = "-"   # Log to stderr
loglevel = os.getenv("LOG_LEVEL", "info").lower()


# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting ITCommunity API")


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Gunicorn server is ready. Spawning workers")


def worker_abort(worker):
    """Called when a worker is aborted (usually a request timeout)."""
    worker.log.warning("Worker received SIGABRT signal")
