import uuid

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user

from slopeshot.messages import NAME_MAX_LENGTH
from slopeshot.models import GuestUser

main = Blueprint('main', __name__)


@main.route('/')
def index():
    registry = current_app.extensions['slopeshot'].registry
    return jsonify({'message': 'Welcome to the Slope Shot server!', 'rooms': len(registry)})


@main.route('/login', methods=['POST', 'OPTIONS'])
def login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    name = name.strip() if isinstance(name, str) else ''
    if not name:
        return jsonify({"success": False, "message": "Name is required"}), 400
    if len(name) > NAME_MAX_LENGTH:
        return jsonify({"success": False, "message": f"Name must be at most {NAME_MAX_LENGTH} characters"}), 400

    user = GuestUser(uuid.uuid4().hex, name)
    current_app.extensions['slopeshot_guests'][user.id] = user
    login_user(user)
    return jsonify({"success": True, "user": user.to_dict()})


@main.route('/check_login', methods=['GET', 'OPTIONS'])
def check_login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200

    @login_required
    def protected_check():
        return jsonify({"success": True, "user": current_user.to_dict()})

    return protected_check()


@main.route('/logout', methods=['POST', 'OPTIONS'])
@login_required
def logout():
    current_app.extensions['slopeshot_guests'].pop(current_user.id, None)
    logout_user()
    return jsonify({"success": True})
