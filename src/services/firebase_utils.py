import os
import firebase_admin
from firebase_admin import credentials, firestore

from config import COLLECTIONS

_db = None


def get_db():
    """Initialize Firebase only once and return the Firestore client"""
    global _db
    if _db is None:
        if not firebase_admin._apps:
            cred_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
            if cred_path and os.path.exists(cred_path):
                firebase_admin.initialize_app(credentials.Certificate(cred_path))
            else:
                firebase_admin.initialize_app()
        _db = firestore.client()
    return _db

# --- ROLE UTILITIES ---
def get_role(role_id):
    doc = get_db().collection(COLLECTIONS["ROLES"]).document(role_id).get()
    return doc.to_dict() if doc.exists else None

def get_role_position(role_id):
    role = get_role(role_id)
    if not role:
        return 0
    return int(role.get("position", 0))

def set_role_position(role_id, name, position):
    get_db().collection(COLLECTIONS["ROLES"]).document(role_id).set({
        "name": name,
        "position": position,
        "updated_at": firestore.SERVER_TIMESTAMP
    }, merge=True)

# --- CONFIG UTILITIES ---
def set_global_config(config):
    get_db().collection(COLLECTIONS["CONFIG"]).document("global").set(config, merge=True)

def get_global_config():
    doc = get_db().collection(COLLECTIONS["CONFIG"]).document("global").get()
    return doc.to_dict() if doc.exists else None
