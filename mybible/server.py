import logging
import os

from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

from mybible.core import config
from mybible.routes.references_api import references_bp

load_dotenv()


def create_app() -> Flask:
    app = Flask(__name__)

    CORS(app)

    # Register blueprints
    app.register_blueprint(references_bp)
    return app


app = create_app()


def main():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    app.run(host=os.getenv("MYBIBLE_HOST", "127.0.0.1"), port=int(os.getenv("MYBIBLE_PORT", "5055")))


if __name__ == "__main__":
    main()
