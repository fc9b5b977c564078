"""Seed the database with a demo university, two players and a duel-sized question bank

Run from backend/: python -m quizduel.database.seed
"""
import asyncio

from .connection import connect_to_mongo, close_mongo_connection, get_database
from ..models.classroom import ClassroomModel
from ..models.course import Course, CourseModel, University, UniversityModel
from ..models.duel import ROUNDS_PER_DUEL, QUESTIONS_PER_ROUND
from ..models.question import AnswerOption, Question, QuestionModel
from ..models.user import UserModel


QUESTIONS = [
    ("Which data structure follows first-in, first-out order?", ["Stack", "Queue", "Heap", "Tree"], 1),
    ("What is the time complexity of binary search?", ["O(n)", "O(log n)", "O(n log n)", "O(1)"], 1),
    ("Which HTTP method is idempotent?", ["POST", "PATCH", "PUT", "CONNECT"], 2),
    ("Which SQL clause filters grouped rows?", ["WHERE", "HAVING", "ORDER BY", "LIMIT"], 1),
    ("What does CPU stand for?", ["Central Processing Unit", "Computer Power Unit", "Core Program Utility", "Central Peripheral Unit"], 0),
    ("Which sorting algorithm is stable?", ["Quicksort", "Heapsort", "Merge sort", "Selection sort"], 2),
    ("How many bits are in a byte?", ["4", "8", "16", "32"], 1),
    ("Which protocol resolves domain names?", ["DNS", "DHCP", "ARP", "SMTP"], 0),
    ("What is the base of the hexadecimal system?", ["2", "8", "10", "16"], 3),
    ("Which layer of the OSI model handles routing?", ["Transport", "Network", "Session", "Data link"], 1),
    ("Which keyword defines a generator in Python?", ["return", "async", "yield", "lambda"], 2),
    ("What does ACID's 'I' stand for?", ["Integrity", "Isolation", "Indexing", "Immutability"], 1),
    ("Which graph search uses a queue?", ["Depth-first search", "Breadth-first search", "Dijkstra with a stack", "Backtracking"], 1),
    ("What is 2 to the power of 10?", ["512", "1000", "1024", "2048"], 2),
    ("Which status code means 'Not Found'?", ["200", "301", "404", "500"], 2),
]


async def seed_users(users: UserModel):
    """Seed two demo players"""
    if await users.collection.count_documents({}) > 0:
        print("Users already exist, skipping seed")
        return []

    created = []
    for email, name in [("alice@example.com", "Alice"), ("bob@example.com", "Bob")]:
        user = await users.create({"email": email, "displayName": name})
        created.append(user["id"])
        print(f"Created user: {email}")
    return created


async def seed_classroom(universities: UniversityModel, courses: CourseModel,
                         classrooms: ClassroomModel, users: UserModel, user_ids):
    if await universities.collection.count_documents({}) > 0:
        print("Universities already exist, skipping seed")
        return

    university_id = await universities.create(University(name="Demo University", location="Berlin"))
    course_id = await courses.create(Course(universityId=university_id, name="Computer Science Basics"))
    classroom_id = None
    for user_id in user_ids:
        await users.set_course(user_id, course_id)
        classroom_id = await classrooms.add_member(course_id, user_id)
    print(f"Created university {university_id}, course {course_id}, classroom {classroom_id}")


async def seed_questions(questions: QuestionModel):
    """Seed enough questions for one full duel"""
    if await questions.count() > 0:
        print("Questions already exist, skipping seed")
        return

    for text, options, correct in QUESTIONS:
        option_ids = ["a", "b", "c", "d"]
        await questions.create(Question(
            text=text,
            options=[AnswerOption(id=oid, text=label) for oid, label in zip(option_ids, options)],
            correctOptionId=option_ids[correct],
        ))
    needed = ROUNDS_PER_DUEL * QUESTIONS_PER_ROUND
    if len(QUESTIONS) < needed:
        print(f"⚠️ Seeded {len(QUESTIONS)} questions, a duel needs {needed}")


async def seed_database():
    """Seed all data"""
    await connect_to_mongo()
    try:
        database = get_database()
        users = UserModel(database)
        user_ids = await seed_users(users)
        await seed_classroom(
            UniversityModel(database), CourseModel(database),
            ClassroomModel(database), users, user_ids
        )
        await seed_questions(QuestionModel(database))
        print("\n✅ Database seeded successfully!")
    except Exception as e:
        print(f"\n❌ Error seeding database: {e}")
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    asyncio.run(seed_database())
