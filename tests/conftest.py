"""Test configuration and fixtures"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from beadstore import BeadsStore, StoreConfig


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation"""
    temp_dir = tempfile.mkdtemp()
    original_cwd = os.getcwd()
    os.chdir(temp_dir)

    yield Path(temp_dir)

    os.chdir(original_cwd)
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def db_path(temp_dir):
    return temp_dir / ".beads" / "beads.db"


@pytest.fixture
def store(db_path):
    """A fresh store on a temporary SQLite file"""
    store = BeadsStore(StoreConfig(db_path=db_path, id_prefix="test", actor="tester"))

    yield store

    store.close()


@pytest.fixture
def raw_session(store, db_path):
    """Plain SQLAlchemy session that bypasses the services and their filters"""
    engine = create_engine(f"sqlite:///{db_path}")
    session = sessionmaker(bind=engine)()

    yield session

    session.close()
    engine.dispose()
