from __future__ import annotations

import sqlite3
from collections.abc import Callable, Generator
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient as FastAPITestClient

from shipyard import db, repository
from shipyard.main import app
from shipyard.models import Application, Environment, Pipeline, PipelineType, Project


@dataclass
class Catalog:
    project: Project
    build: Pipeline
    deploy: Pipeline
    staging: Environment
    production: Environment
    existing: Application


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("SHIPYARD_DB_PATH", str(db_file))
    return db_file


@pytest.fixture
def client(db_path) -> Generator[FastAPITestClient, None, None]:
    with FastAPITestClient(app) as test_client:
        yield test_client


@pytest.fixture
def _setup_connection(db_path) -> Callable[[], sqlite3.Connection]:
    def _factory() -> sqlite3.Connection:
        connection = db.connect(str(db_path))
        db.init_db(connection)
        return connection

    return _factory


@pytest.fixture
def connection(_setup_connection) -> Generator[sqlite3.Connection, None, None]:
    connection = _setup_connection()
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def catalog(connection) -> Catalog:
    project = repository.create_project(connection, key="ACME", name="Acme")
    build = repository.create_pipeline(connection, project.id, "build")
    deploy = repository.create_pipeline(
        connection, project.id, "deploy", PipelineType.DEPLOYMENT
    )
    staging = repository.create_environment(connection, project.id, "staging")
    production = repository.create_environment(connection, project.id, "production")
    repository.create_group(connection, "developers")
    existing = repository.create_application(connection, project.id, "legacy-api")
    return Catalog(
        project=repository.load_project(connection, "ACME"),
        build=build,
        deploy=deploy,
        staging=staging,
        production=production,
        existing=existing,
    )
