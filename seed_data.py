import random
from datetime import datetime, timedelta, timezone
from sqlmodel import Session, SQLModel, select

from models import User, Post
from dependencies import engine
from auth.security import get_password_hash

# Data pools
FIRST_NAMES = [
    "Juan", "María", "Alberto", "Lucía", "Pedro", "Ana", "Carlos", "Sofia",
    "John", "Emma", "Michael", "Sarah", "David", "Isabella", "James", "Laura"
]

LAST_NAMES = [
    "Domínguez", "García", "Rodríguez", "López", "Martínez", "González",
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Miller", "Davis"
]

POST_TITLES = [
    "First steps with FastAPI",
    "Why I moved my notes to plain text",
    "A week without meetings",
    "Notes from the local meetup",
    "Debugging a slow query",
    "Things I learned reviewing code",
    "Coffee, keyboards and side projects",
]

POST_BODIES = [
    "Finally got the first version deployed, and it was smoother than expected.",
    "Short write-up of what went well and what I would change next time.",
    "Turns out the index was there all along, it just was not being used.",
    "A few links and thoughts I want to come back to later.",
    "Nothing fancy, just a log of what happened this week.",
]

DEFAULT_PASSWORD = "password123"


def random_date(start_date, end_date):
    time_between = end_date - start_date
    days_between = max(time_between.days, 1)
    random_number_of_days = random.randrange(days_between)
    random_time = timedelta(
        hours=random.randint(0, 23),
        minutes=random.randint(0, 59),
        seconds=random.randint(0, 59)
    )
    return start_date + timedelta(days=random_number_of_days) + random_time

def create_test_data(user_count: int = 5, post_count: int = 20):
    """Fill an empty database with demo users and posts"""
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        if session.exec(select(User)).first():
            print("Database already has users, skipping seed data")
            return

        # Create users with random names, all sharing the demo password
        users = []
        taken = set()
        while len(users) < user_count:
            first_name = random.choice(FIRST_NAMES)
            last_name = random.choice(LAST_NAMES)
            username = f"{first_name.lower()}{random.randint(1, 999)}"
            if username in taken:
                continue
            taken.add(username)

            users.append(User(
                username=username,
                email=f"{username}@example.com",
                full_name=f"{first_name} {last_name}",
                password=get_password_hash(DEFAULT_PASSWORD),
            ))

        session.add_all(users)
        session.commit()

        # Create posts with random content and dates
        posts = []
        start_date = datetime(2023, 1, 1, tzinfo=timezone.utc)
        end_date = datetime.now(timezone.utc)
        for _ in range(post_count):
            created_at = random_date(start_date, end_date)
            posts.append(Post(
                user_id=random.choice(users).id,
                title=random.choice(POST_TITLES),
                body=random.choice(POST_BODIES),
                created_at=created_at,
                updated_at=created_at,
            ))

        session.add_all(posts)
        session.commit()

        print("Test data created successfully!")
        print(f"Created {len(users)} users (password: {DEFAULT_PASSWORD})")
        print(f"Created {len(posts)} posts")

if __name__ == "__main__":
    create_test_data()
