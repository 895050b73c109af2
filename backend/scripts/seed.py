"""Seed script to create the tables and starter templates for development/demo."""

import sys
import os
import logging

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from formbuilder.database import SessionLocal, engine, Base
from formbuilder.models import Template
from formbuilder.seeds import STARTER_TEMPLATES, seed_templates
from formbuilder.services.auth import AuthService


def seed_database():
    """Create initial seed data."""
    db = SessionLocal()

    try:
        print("Creating templates...")
        created = seed_templates(db)

        print("\nSeed data created successfully!")
        print(f"\n{created} new templates, {db.query(Template).count()} in total:")
        for template in STARTER_TEMPLATES:
            print(f"  - {template['name']}")

        # Tokens normally come from the identity provider
        print("\nDevelopment token for user 'demo-user':")
        print(f"  {AuthService.create_access_token('demo-user')}")

    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    # Create tables
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    # Seed data
    seed_database()
