"""
Firebase initialization for the flood report backend.

Credentials come from either:
1. FIREBASE_CREDENTIALS_BASE64 - base64-encoded service account JSON (PaaS deployments)
2. FIREBASE_CREDENTIALS_PATH - path to a service account JSON file (local, VPS)
"""

import os
import json
import base64
import logging

import firebase_admin
from firebase_admin import credentials, db

logger = logging.getLogger(__name__)


def get_firebase_credentials():
    """
    Load Firebase service account credentials from the environment.

    Returns:
        firebase_admin.credentials.Certificate: Firebase credentials object

    Raises:
        ValueError: If no usable credentials are configured
    """
    base64_creds = os.getenv('FIREBASE_CREDENTIALS_BASE64')
    if base64_creds:
        try:
            cred_dict = json.loads(base64.b64decode(base64_creds).decode('utf-8'))
        except (ValueError, UnicodeDecodeError) as e:
            raise ValueError(f"Failed to decode FIREBASE_CREDENTIALS_BASE64: {e}")
        return credentials.Certificate(cred_dict)

    cred_path = os.getenv('FIREBASE_CREDENTIALS_PATH')
    if cred_path and os.path.exists(cred_path):
        return credentials.Certificate(cred_path)

    raise ValueError(
        "No Firebase credentials found. Set either "
        "FIREBASE_CREDENTIALS_BASE64 (base64-encoded service account JSON) or "
        "FIREBASE_CREDENTIALS_PATH (path to service account JSON file)"
    )


def initialize_firebase(database_url):
    """
    Initialize the default Firebase app once and return the database module.

    Returns:
        firebase_admin.db module, or None when credentials are missing
    """
    if firebase_admin._apps:
        return db

    try:
        cred = get_firebase_credentials()
    except ValueError as e:
        logger.error(f"Firebase initialization failed: {e}")
        return None

    firebase_admin.initialize_app(cred, {'databaseURL': database_url})
    logger.info("Firebase initialized")
    return db
