"""
Flask blueprints for the Weitblick API.
"""

from flask import Blueprint

# Create blueprints
discourse_bp = Blueprint('discourse', __name__)
credentials_bp = Blueprint('credentials', __name__)
compass_bp = Blueprint('compass', __name__)
# Import routes to register them
from . import discourse
from . import credentials
from . import compass
