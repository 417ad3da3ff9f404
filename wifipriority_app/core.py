"""Core compatibility facade.

Re-exports split core modules so callers can import from one place.
"""

from .core_base import *
from .core_models import *
from .core_nmcli import *
from .core_directory import *
from .core_ranking import *
from .core_reconcile import *
from .core_engine import *
