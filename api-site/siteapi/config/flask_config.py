# siteapi/config/flask_config.py
from flask import Flask

from siteapi.config.settings import Settings


def configure_app(app: Flask, settings: Settings) -> None:
    app.config["ENV"] = settings.environment
    app.config["DEBUG"] = settings.debug
    app.config["SECRET_KEY"] = settings.jwt_secret
    app.json.sort_keys = False
    app.extensions["settings"] = settings
