# wsgi.py (at repo root)
from trigger_tracker import create_app

app = create_app()
