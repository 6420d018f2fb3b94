"""Flask app factory for the tweetstorm API."""

from typing import Optional

from flask import Flask

from tweetstorm.config import Settings, load_settings


def create_app(settings: Optional[Settings] = None):
    app = Flask(__name__)
    app.config["TWEETSTORM_SETTINGS"] = settings or load_settings()

    from web.routes import bp
    app.register_blueprint(bp)

    return app
