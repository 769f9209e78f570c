import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
worker_class = "uvicorn.workers.UvicornWorker"

# One worker: each worker owns its own orchestrator, so "one generation at a time"
# holds per worker only. Scale out with more instances instead.
workers = int(os.getenv("WEB_CONCURRENCY", "1"))
timeout = 300             # text + image calls can take a while
graceful_timeout = 30
keepalive = 75

max_requests = int(os.getenv("MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("MAX_REQUESTS_JITTER", "100"))

# Cloud Run/GKE capture stdout
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
