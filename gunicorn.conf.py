"""
Gunicorn configuration for the Ten Insights API.

Run with: gunicorn ten_insights.main:app -c gunicorn.conf.py

Env vars that override defaults:
  PORT: TCP port to bind (Railway / Render set this automatically)
  WORKERS: number of worker processes (default: 1)
  LOG_LEVEL: gunicorn log level (default: info)
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Check-in sessions live in the worker that started them; only the cooldown
# is shared through the database. Keep one worker unless the load balancer
# pins each user to a worker for the length of a check-in.
workers = int(os.environ.get("WORKERS", "1"))

# Uvicorn's ASGI event loop inside gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Kill a worker that has not responded in 60 s.
timeout = 60
graceful_timeout = 30

loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'
