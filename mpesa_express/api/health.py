"""
Liveness Endpoints
"""

from flask import Blueprint, current_app, jsonify
from datetime import datetime, timezone

health_bp = Blueprint('health', __name__)

ANY_METHOD = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS', 'HEAD']


@health_bp.route('/', methods=ANY_METHOD)
def index():
    """Plain-text liveness string, answered for any method"""
    return current_app.config['SERVICE_NAME'], 200, {'Content-Type': 'text/plain; charset=utf-8'}


@health_bp.route('/health', methods=['GET'])
def liveness_check():
    """
    Kubernetes liveness check
    Returns 200 if the application is running
    """
    return jsonify({
        'status': 'alive',
        'service': current_app.config['SERVICE_NAME'],
        'timestamp': datetime.now(timezone.utc).isoformat()
    }), 200
