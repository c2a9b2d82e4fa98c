# models/__init__.py
from utils.db import Base  # re-export
from .user import User
from .farm import Farm
from .map import MapPoint, MapLine, MapZone
from .task import Task
from .finance import FinanceMovement, Asset
