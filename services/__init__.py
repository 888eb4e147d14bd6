"""
Service layer.

``build_services`` wires every service with its collaborators once per app and
stores the bundle in ``app.extensions["services"]``; blueprints reach it with
``get_services()``.
"""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from models.repositories import RefreshTokenRepository, UserRepository
from services.auth import AuthService
from services.auth_providers import AuthProviderService
from services.course_contents import CourseContentService
from services.course_sessions import CourseSessionService
from services.courses import CourseService
from services.email import EmailDispatcher, build_email_dispatcher
from services.enrollments import EnrollmentService
from services.learner_progress import LearnerProgressService
from services.messages import MessageService
from services.notifications import NotificationService
from services.tokens import TokenSigner
from services.users import UserService
from utils.security import build_password_hasher


@dataclass
class Services:
    signer: TokenSigner
    mailer: EmailDispatcher
    auth: AuthService
    users: UserService
    courses: CourseService
    sessions: CourseSessionService
    contents: CourseContentService
    enrollments: EnrollmentService
    progress: LearnerProgressService
    messages: MessageService
    notifications: NotificationService
    auth_providers: AuthProviderService


def build_services(config, storage) -> Services:
    signer = TokenSigner(
        access_secret=config["JWT_ACCESS_SECRET"],
        refresh_secret=config["JWT_REFRESH_SECRET"],
        algorithm=config.get("JWT_ALGORITHM", "HS256"),
        access_ttl=config["JWT_ACCESS_EXPIRES"],
        refresh_ttl=config["JWT_REFRESH_EXPIRES"],
        issuer=config.get("JWT_ISSUER", "elearning-api"),
    )
    hasher = build_password_hasher(
        config.get("ARGON2_TIME_COST"),
        config.get("ARGON2_MEMORY_COST"),
        config.get("ARGON2_PARALLELISM"),
    )
    mailer = build_email_dispatcher(config)
    notifications = NotificationService(storage)

    return Services(
        signer=signer,
        mailer=mailer,
        auth=AuthService(
            users=UserRepository(storage),
            tokens=RefreshTokenRepository(storage),
            signer=signer,
            mailer=mailer,
            hasher=hasher,
        ),
        users=UserService(storage, hasher=hasher),
        courses=CourseService(storage),
        sessions=CourseSessionService(storage),
        contents=CourseContentService(storage),
        enrollments=EnrollmentService(storage, notifications, mailer),
        progress=LearnerProgressService(storage, notifications),
        messages=MessageService(storage),
        notifications=notifications,
        auth_providers=AuthProviderService(storage),
    )


def get_services() -> Services:
    return current_app.extensions["services"]
