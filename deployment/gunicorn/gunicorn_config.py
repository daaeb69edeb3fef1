import os

bind = os.getenv("GUNICORN_BIND", "unix:/var/www/agri-office/agri-office-backend/gunicorn.sock")
workers = int(os.getenv("GUNICORN_WORKERS", "3"))
max_requests = 1000
max_requests_jitter = 100
# Excel/PDF exports of a full season can take a while
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))

accesslog = os.getenv("GUNICORN_ACCESS_LOG", "/var/log/agri-office-backend/access.log")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "/var/log/agri-office-backend/error.log")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

proc_name = "agri-office-backend"
