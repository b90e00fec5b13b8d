# Schemas package (re-export feature modules for stable imports)
from .analysis import *
from .common import *
from .ui import *
