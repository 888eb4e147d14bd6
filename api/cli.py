"""
Operational commands, available as ``flask --app api seed`` and ``flask --app api purge-tokens``.
"""
import json
from decimal import Decimal

import click

from models import storage
from models.course import Course
from models.course_content import CourseContent
from models.user import User
from services import get_services
from services.courses import slugify
from utils.logger import get_logger
from utils.security import hash_password

logger = get_logger("cli")

DEMO_USERS = [
    {
        "email": "admin@example.com",
        "password": "Admin123!",
        "first_name": "Admin",
        "last_name": "User",
        "role": "admin",
        "bio": "System Administrator",
    },
    {
        "email": "trainer@example.com",
        "password": "Trainer123!",
        "first_name": "John",
        "last_name": "Trainer",
        "role": "trainer",
        "bio": "Experienced trainer with 10+ years in software development",
        "certifications": json.dumps(["Certified Scrum Master", "AWS Solutions Architect"]),
    },
    {
        "email": "learner@example.com",
        "password": "Learner123!",
        "first_name": "Jane",
        "last_name": "Learner",
        "role": "learner",
        "bio": "Aspiring developer looking to enhance skills",
    },
]

DEMO_COURSES = [
    {
        "title": "Flask Fundamentals",
        "description": "Build REST APIs with Flask, blueprints and SQLAlchemy",
        "level": "beginner",
        "price": Decimal("99.99"),
        "duration": "4 weeks",
        "contents": [
            ("video", "Introduction to Flask", "https://example.com/video1"),
            ("pdf", "Application Factory Guide", "https://example.com/pdf1"),
            ("quiz", "Chapter 1 Quiz", None),
        ],
    },
    {
        "title": "Advanced Database Design",
        "description": "Master database design patterns and optimization techniques",
        "level": "advanced",
        "price": Decimal("149.99"),
        "duration": "6 weeks",
        "contents": [],
    },
]


def seed_demo_data() -> dict:
    """Create the demo accounts and courses that are missing; returns what was created."""
    session = storage.get_session()
    hasher = get_services().users.hasher
    created = {"users": 0, "courses": 0}

    for entry in DEMO_USERS:
        if session.query(User).filter(User.email == entry["email"]).first():
            continue
        fields = {k: v for k, v in entry.items() if k != "password"}
        storage.new(User(password_hash=hash_password(entry["password"], hasher), **fields))
        created["users"] += 1

    for entry in DEMO_COURSES:
        slug = slugify(entry["title"])
        if session.query(Course).filter(Course.slug == slug).first():
            continue
        fields = {k: v for k, v in entry.items() if k != "contents"}
        course = Course(slug=slug, **fields)
        for index, (content_type, title, url) in enumerate(entry["contents"], start=1):
            course.contents.append(
                CourseContent(type=content_type, title=title, content_url=url, order_index=index)
            )
        storage.new(course)
        created["courses"] += 1

    storage.save()
    return created


def register_commands(app):
    @app.cli.command("seed")
    def seed():
        """Create demo admin/trainer/learner accounts and two sample courses."""
        created = seed_demo_data()
        logger.info("Seed finished: %s", created)
        click.echo(f"Created {created['users']} user(s) and {created['courses']} course(s)")

    @app.cli.command("purge-tokens")
    def purge_tokens():
        """Delete every expired refresh token."""
        deleted = get_services().auth.purge_expired_tokens()
        click.echo(f"Deleted {deleted} expired refresh token(s)")
