import multiprocessing
import os

# Gunicorn configuration for the OmniTrackr API
# Run with: gunicorn omnitrackr.main:app -c gunicorn_conf.py

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")

# (2 x num_cores) + 1 unless overridden
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"

timeout = 120
keepalive = 5

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

name = "omnitrackr_api"
reload = False
