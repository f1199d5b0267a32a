import os
import json
import logging

from dotenv import load_dotenv

load_dotenv()

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from budget.routes import create_budget_bp
from community_feed.routes import create_community_bp
from discovery_apis.routes import create_discovery_bp
from itinerary_generator.routes import create_itinerary_bp
from media.routes import create_media_bp
from trips.routes import create_trips_bp
from user_auth.routes import create_user_bp, create_auth_bp

FIREBASE_SERVICE_ACCOUNT_CONTENT = os.environ.get('FIREBASE_SERVICE_ACCOUNT_CONTENT')
FIREBASE_SERVICE_ACCOUNT_PATH = os.environ.get('FIREBASE_SERVICE_ACCOUNT_PATH', "credentials/serviceAccountKey.json")
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def _initialize_firebase():
    if firebase_admin._apps:
        return firebase_admin.get_app()

    if FIREBASE_SERVICE_ACCOUNT_CONTENT:
        cred = credentials.Certificate(json.loads(FIREBASE_SERVICE_ACCOUNT_CONTENT))
        logging.info("Firebase initialized using environment variable.")
    elif os.path.exists(FIREBASE_SERVICE_ACCOUNT_PATH):
        cred = credentials.Certificate(FIREBASE_SERVICE_ACCOUNT_PATH)
        logging.info("Firebase initialized using local file path.")
    else:
        logging.error(
            f"Firebase service account not found. Expected env var FIREBASE_SERVICE_ACCOUNT_CONTENT "
            f"or file at {FIREBASE_SERVICE_ACCOUNT_PATH}."
        )
        raise FileNotFoundError(
            f"Firebase service account not found. Expected env var FIREBASE_SERVICE_ACCOUNT_CONTENT "
            f"or file at {FIREBASE_SERVICE_ACCOUNT_PATH}."
        )
    return firebase_admin.initialize_app(cred)


def create_app(db_instance=None):
    """
    Builds the Flask app. Pass db_instance to use a specific Firestore client;
    otherwise Firebase is initialized from the service account.
    """
    if db_instance is None:
        db_instance = firestore.client(app=_initialize_firebase())

    app = Flask(__name__)
    app.secret_key = os.environ.get('FLASK_SECRET_KEY', 'a_fallback_secret_key_for_dev_only')

    app.register_blueprint(create_auth_bp(db_instance))
    app.register_blueprint(create_user_bp(db_instance))
    app.register_blueprint(create_trips_bp(db_instance))
    app.register_blueprint(create_budget_bp(db_instance))
    app.register_blueprint(create_itinerary_bp(db_instance))
    app.register_blueprint(create_community_bp(db_instance))
    app.register_blueprint(create_discovery_bp())
    app.register_blueprint(create_media_bp())

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.route('/')
    def home():
        return 'Server is working!'

    return app


if __name__ == '__main__':
    create_app().run(debug=True)
