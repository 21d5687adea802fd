"""Application lifecycle controllers."""

from dithost.controllers.app_controller import AppController
from dithost.controllers.serialized import SerializedAppController

__all__ = ["AppController", "SerializedAppController"]
