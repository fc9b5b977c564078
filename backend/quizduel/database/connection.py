from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional
import os
from pathlib import Path
from dotenv import load_dotenv
from urllib.parse import quote_plus, urlparse, urlunparse


# ---------------------------------------------------
# LOAD .env ONLY IN LOCAL DEVELOPMENT
# ---------------------------------------------------
# Railway sets environment variable: RAILWAY_ENVIRONMENT
if not os.getenv("RAILWAY_ENVIRONMENT"):
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
        print("🔧 Loaded .env (local development)")


class MongoDB:
    client: Optional[AsyncIOMotorClient] = None
    database = None


# Process-wide handle; request code receives it through get_database()
db = MongoDB()


# ---------------------------------------------------
# ESCAPE CREDENTIALS IN THE MONGODB URL
# ---------------------------------------------------
def escape_mongodb_url(url: str) -> str:
    """Percent-encode the user and password parts of a connection string."""
    if not url or "://" not in url:
        return url

    parsed = urlparse(url)
    if not parsed.username and not parsed.password:
        return url

    credentials = quote_plus(parsed.username or "")
    if parsed.password:
        credentials += ":" + quote_plus(parsed.password)

    host = parsed.hostname or ""
    if parsed.port:
        host += f":{parsed.port}"

    return urlunparse((
        parsed.scheme,
        f"{credentials}@{host}",
        parsed.path,
        parsed.params,
        parsed.query,
        parsed.fragment
    ))


# ---------------------------------------------------
# CONNECT TO MONGODB
# ---------------------------------------------------
async def connect_to_mongo():
    mongodb_url = os.getenv("MONGODB_URL")
    database_name = os.getenv("DATABASE_NAME")

    if not mongodb_url:
        raise RuntimeError("❌ MONGODB_URL is not set in environment variables.")

    if not database_name:
        raise RuntimeError("❌ DATABASE_NAME is not set in environment variables.")

    mongodb_url = escape_mongodb_url(mongodb_url)

    print("🔗 Connecting to MongoDB...")

    client_options = {}
    if mongodb_url.startswith("mongodb+srv://"):
        import certifi
        client_options["tlsCAFile"] = certifi.where()

    db.client = AsyncIOMotorClient(mongodb_url, **client_options)
    db.database = db.client[database_name]

    try:
        await db.client.admin.command("ping")
        print(f"✅ Connected to MongoDB: {database_name}")
    except Exception as e:
        print(f"❌ Failed to connect to MongoDB: {e}")
        raise

    await ensure_indexes(db.database)


async def ensure_indexes(database):
    """Indexes backing the lookups the duel endpoints do on every request."""
    await database.questions.create_index([("createdAt", 1), ("_id", 1)])
    await database.courses.create_index("universityId")
    await database.classrooms.create_index("courseId", unique=True)
    await database.users.create_index("email", unique=True)
    await database.push_subscriptions.create_index(
        [("userId", 1), ("endpoint", 1)], unique=True
    )
    await database.duels.create_index([("player1", 1), ("createdAt", -1)])
    await database.duels.create_index([("player2", 1), ("createdAt", -1)])


# ---------------------------------------------------
# DISCONNECT
# ---------------------------------------------------
async def close_mongo_connection():
    if db.client:
        db.client.close()
        db.client = None
        db.database = None
        print("🔌 MongoDB connection closed")


# ---------------------------------------------------
# ACCESS HELPERS
# ---------------------------------------------------
def get_database():
    return db.database
