import os
import sys
# ensure backend package is on path for tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
# keep the app's import-time create_all away from the dev database file
os.environ.setdefault('DATABASE_URL', 'sqlite://')

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from productreview.catalog_service import CatalogService
from productreview.database import Base, get_db, make_engine
from productreview.main import app


@pytest.fixture
def session_factory(tmp_path):
    # file-backed sqlite so worker threads in concurrency tests share one database
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def catalog(db):
    return CatalogService(db)


@pytest.fixture
def product(catalog):
    return catalog.create_product(
        name="Sony WH-1000XM5",
        description="Industry-leading noise canceling headphones.",
        category="Electronics",
        price=349.99,
    )


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
