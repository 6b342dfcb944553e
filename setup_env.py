#!/usr/bin/env python3
"""
Environment setup script for Tutor Scheduler API.
Writes a .env file with a fresh secret key.
"""

import secrets
import string
import os

def generate_secret_key(length=64):
    """Generate a random secret key."""
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return ''.join(secrets.choice(alphabet) for _ in range(length))

def build_env_content(secret_key: str) -> str:
    return f"""# Tutor Scheduler API Environment Variables
DATABASE_URL=sqlite:///./tutor_scheduler.db
SECRET_KEY={secret_key}
ALGORITHM=HS256
ACCESS_TOKEN_EXPIRE_MINUTES=30
LOG_LEVEL=INFO
"""

def main():
    print("🚀 Setting up Tutor Scheduler API...\n")

    # Check if .env already exists
    if os.path.exists('.env'):
        print("⚠️  .env file already exists. Do you want to overwrite it? (y/n): ", end="")
        response = input().lower().strip()
        if response != 'y':
            print("❌ Setup cancelled.")
            return

    secret_key = generate_secret_key(64)

    with open('.env', 'w') as f:
        f.write(build_env_content(secret_key))

    print("✅ Environment setup completed!")
    print(f"🔑 Secret key generated: {secret_key[:20]}...")

    print("\n📋 Next steps:")
    print("1. Install dependencies: pip install -e .[test]")
    print("2. Run the application: python run.py")
    print("3. Open http://localhost:8000/docs in your browser")

    print("\n🎯 API Endpoints:")
    print("   • Rank slots: POST /slot-ranking/rank")
    print("   • Book slot: POST /slot-ranking/select")
    print("   • Replace lesson: POST /slot-ranking/replace")
    print("   • Preferences: GET/PUT /slot-weights/me")
    print("   • Health: GET /health")

if __name__ == "__main__":
    main()
