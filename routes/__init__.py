"""
Flask blueprints for the theme library API.
"""

from flask import Blueprint

# Create blueprints
library_bp = Blueprint('library', __name__)
transfer_bp = Blueprint('transfer', __name__)

# Import routes to register them
from . import library
from . import transfer
