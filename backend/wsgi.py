# backend/wsgi.py
from propos import create_app

app = create_app()
