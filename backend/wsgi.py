"""WSGI entrypoint: ``gunicorn -c gunicorn.conf.py wsgi:app``."""

from customer_auth import create_app

app = create_app()
