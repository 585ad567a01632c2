from __future__ import annotations

import atexit
import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .scanning.controller import register as register_scanning
from .settings import ScannerSettings


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    container = container or build_container(settings=ScannerSettings.from_module(settings))
    app.extensions["qr_checkin"] = container

    logging.getLogger(__name__).info(
        "settings=%s organization=%s api=%s camera=%s",
        settings_module,
        container.settings.organization,
        container.settings.api_base_url,
        container.settings.camera_source,
    )

    register_scanning(app, container)
    # Release the camera on interpreter exit.
    atexit.register(container.scanner.close)

    return app
