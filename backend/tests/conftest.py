import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from resource_api.database import get_session, init_db
from resource_api.main import create_app
from resource_api.services.todo_repo import InMemoryTodoRepo, SqlTodoRepo

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. Tables are dropped and recreated per test, so todo ids restart at 1
# 4. App dependency overridden to use test_engine (see client_fixture)
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="engine")
def engine_fixture():
    SQLModel.metadata.drop_all(test_engine)
    init_db(test_engine)
    yield test_engine


@pytest.fixture(name="session")
def session_fixture(engine):
    """Provide a test database session on a freshly created schema"""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="sql_repo")
def sql_repo_fixture(engine):
    return SqlTodoRepo(engine)


@pytest.fixture(name="client")
def client_fixture(sql_repo):
    """Test client wired to the SQL todo repository on the test engine

    Override MUST be set BEFORE TestClient() and stay in place for the
    entire duration, so the app never touches its own engine.
    """
    app = create_app(todo_repo=sql_repo)
    app.dependency_overrides[get_session] = override_get_session

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="memory_client")
def memory_client_fixture():
    """Test client wired to the in-memory todo repository"""
    app = create_app(todo_repo=InMemoryTodoRepo())
    with TestClient(app) as client:
        yield client


@pytest.fixture(name="todo_client", params=["sql", "memory"])
def todo_client_fixture(request):
    """Runs a test once per TodoRepo implementation"""
    return request.getfixturevalue("client" if request.param == "sql" else "memory_client")
