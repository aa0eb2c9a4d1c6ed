"""Gunicorn configuration for production deployment."""

# Server socket
bind = '0.0.0.0:8000'

# One worker process; its threads share the booking runtime, whose lock
# serializes feed publication and booking session updates.
# The reservation feed and the booking sessions live in process memory.
workers = 1
threads = 4
worker_class = 'gthread'

# Timeout
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = '/app/logs/gunicorn-access.log'
errorlog = '/app/logs/gunicorn-error.log'
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'catering-reservations'

# Preload app for faster worker startups
preload_app = True

# Security
limit_request_line = 8190
limit_request_fields = 100
limit_request_field_size = 8190
