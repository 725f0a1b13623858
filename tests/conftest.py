from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from quickgpt.core.errors import UpstreamError
from quickgpt.core.security import create_access_token, hash_password
from quickgpt.core.settings import get_settings
from quickgpt.db import Base
from quickgpt.db.models import Chat, User
from quickgpt.db.session import get_db_session
from quickgpt.dependencies import get_gemini_service, get_imagekit_service
from quickgpt.main import create_app

IMAGE_URL = "https://ik.imagekit.io/demo/quickgpt/1760000000000.png"


class FakeTextGenerator:
    def __init__(self, reply: str = "Hello! How can I help?"):
        self.reply = reply
        self.prompts: list[str] = []

    async def generate_reply(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class FakeImageGenerator:
    def __init__(self, url: str = IMAGE_URL):
        self.url = url
        self.prompts: list[str] = []

    async def generate_image(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.url


class FailingGenerator:
    async def generate_reply(self, prompt: str) -> str:
        raise UpstreamError("Text generation failed: 503 UNAVAILABLE")

    async def generate_image(self, prompt: str) -> str:
        raise UpstreamError("Image generation failed: 502 Bad Gateway")


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'quickgpt.db'}", future=True)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, future=True)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def text_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def image_generator() -> FakeImageGenerator:
    return FakeImageGenerator()


@pytest.fixture
def app(session_factory, text_generator, image_generator):
    app = create_app()

    def _db_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _db_session
    app.dependency_overrides[get_gemini_service] = lambda: text_generator
    app.dependency_overrides[get_imagekit_service] = lambda: image_generator
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make_user(
        credits: int = 20, email: str = "ada@example.com", name: str = "Ada"
    ) -> User:
        user = User(
            name=name,
            email=email,
            password_hash=hash_password("correct horse", iterations=1000),
            credits=credits,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_chat(db):
    def _make_chat(user: User) -> Chat:
        chat = Chat(user_id=user.id, user_name=user.name)
        db.add(chat)
        db.commit()
        return chat

    return _make_chat


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        # The web client sends the bare token, without a "Bearer" scheme.
        return {"Authorization": create_access_token(user.id, get_settings())}

    return _auth_headers
