import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from supportdesk.core.ai import Analyzed, Unavailable
from supportdesk.core.database import init_db
from supportdesk.core.deps import get_advisor, get_bot, get_db
from supportdesk.main import app
from supportdesk.models.ticket import TicketPriority
from supportdesk.models.user import User, UserRole
from supportdesk.services.directory import IdentityDirectory
from supportdesk.services.queries import TicketQueryView
from supportdesk.services.tickets import TicketLifecycle


class StubAdvisor:
    def __init__(self, result=None):
        self.result = result or Unavailable(reason="stubbed out")
        self.calls = []

    def analyze(self, subject, description):
        self.calls.append((subject, description))
        return self.result


class StubBot:
    def __init__(self, reply="Thanks for reaching out, we are on it."):
        self.reply = reply
        self.calls = []

    def draft_reply(self, ticket_id, message):
        self.calls.append((ticket_id, message))
        return self.reply


ANALYZED = Analyzed(
    category="Billing",
    priority=TicketPriority.HIGH,
    summary="Customer was charged twice.",
    sentiment="Frustrated",
    solution="Refund the duplicate charge.",
)


def make_sessionmaker(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_sessionmaker(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def add_users(session):
    users = {
        "customer": User(name="Alex Customer", email="alex@example.com", role=UserRole.CUSTOMER),
        "agent": User(name="Maria Agent", email="maria@example.com", role=UserRole.AGENT),
        "other": User(name="Olga Customer", email="olga@example.com", role=UserRole.CUSTOMER),
    }
    session.add_all(users.values())
    session.commit()
    return users


@pytest.fixture
def users(db):
    return add_users(db)


@pytest.fixture
def customer(users):
    return users["customer"]


@pytest.fixture
def agent(users):
    return users["agent"]


@pytest.fixture
def other_customer(users):
    return users["other"]


@pytest.fixture
def advisor():
    return StubAdvisor()


@pytest.fixture
def bot():
    return StubBot()


@pytest.fixture
def directory(db):
    return IdentityDirectory(db)


@pytest.fixture
def tickets(db, directory, advisor):
    return TicketLifecycle(db, directory, advisor)


@pytest.fixture
def thread(tickets):
    return tickets.thread


@pytest.fixture
def view(db):
    return TicketQueryView(db)


@pytest.fixture
def client(session_factory, users, advisor, bot):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_advisor] = lambda: advisor
    app.dependency_overrides[get_bot] = lambda: bot
    yield TestClient(app)
    app.dependency_overrides.clear()
