# Load every model onto Base.metadata whichever db module is imported first.
from . import database  # noqa: F401
