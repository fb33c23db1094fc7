# backend/wsgi.py
from shopos import create_app

app = create_app()
