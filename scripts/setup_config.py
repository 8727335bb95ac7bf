"""
Setup the Firestore config document for bulletin parsing.
Run this script once, or again after editing a template override file:

    python scripts/setup_config.py [overrides.json]
"""
import os
import sys

import firebase_admin
from firebase_admin import firestore

# Allow running from a checkout without `pip install -e .`
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "functions"))

from bulletin_config import BulletinConfig, load_config_file

# Initialize Firebase Admin (uses default credentials)
try:
    firebase_admin.get_app()
except ValueError:
    firebase_admin.initialize_app()

db = firestore.client()

config = load_config_file(sys.argv[1]) if len(sys.argv) > 1 else BulletinConfig()

bulletin_ref = db.collection('config').document('bulletin')
bulletin_ref.set(config.to_dict(), merge=True)
print(f"✅ Set config/bulletin (locations: {', '.join(config.locations)})")

print("\n🎉 Config setup complete!")
