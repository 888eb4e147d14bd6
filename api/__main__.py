"""
Development server: ``python -m api``.
Production deployments serve ``api:create_app()`` from a WSGI server instead.
"""
import os

from . import create_app
from .config import env_bool

app = create_app(os.getenv("APP_ENV"))

if __name__ == "__main__":
    app.run(
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        debug=env_bool("FLASK_DEBUG", app.config.get("DEBUG", False)),
    )
