"""
Create backend/.env for local development
"""
import os


def ask(prompt: str, default: str = "") -> str:
    suffix = f" (default: {default})" if default else ""
    return input(f"{prompt}{suffix}: ").strip() or default


def create_env_file():
    """Create .env file from user input"""
    print("=" * 60)
    print("QuizDuel Environment Setup")
    print("=" * 60)
    print()

    if os.path.exists('.env'):
        response = input("⚠️  .env file already exists. Overwrite? (y/N): ")
        if response.lower() != 'y':
            print("❌ Cancelled. Keeping existing .env file.")
            return

    mongodb_url = ask("MongoDB connection string", "mongodb://localhost:27017")
    db_name = ask("Database name", "quizduel")
    port = ask("Port", "3001")
    rounds = ask("Rounds per duel", "5")
    per_round = ask("Questions per round", "3")

    env_content = f"""# Server Configuration
PORT={port}

# MongoDB Configuration
MONGODB_URL={mongodb_url}
DATABASE_NAME={db_name}

# Duel Rules
DUEL_ROUNDS={rounds}
DUEL_QUESTIONS_PER_ROUND={per_round}

# Web Push (run ../generate_vapid_keys.py and paste the keys here)
VAPID_PUBLIC_KEY=
VAPID_PRIVATE_KEY=
VAPID_SUBJECT=mailto:admin@quizduel.app
"""

    try:
        with open('.env', 'w') as f:
            f.write(env_content)
        print()
        print("✅ .env file created successfully!")
        print()
        print("📝 Next steps:")
        print("   1. Run: python -m quizduel.database.seed (to seed demo data)")
        print("   2. Run: uvicorn quizduel.main:app --reload --port " + port)
        print()
    except OSError as e:
        print(f"❌ Error creating .env file: {e}")


if __name__ == "__main__":
    create_env_file()
