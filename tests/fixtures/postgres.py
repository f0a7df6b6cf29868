import logging
import pathlib
import sys

import pytest
import sqlfrag
from testcontainers.postgres import PostgresContainer

from libb import Setting

HERE = pathlib.Path(pathlib.Path(__file__).resolve()).parent
sys.path.insert(0, str(HERE.parent))
import config

logger = logging.getLogger(__name__)


@pytest.fixture(scope='session')
def psql_docker(request):
    """Session-scoped PostgreSQL container using testcontainers.

    Skips the requesting tests when no container runtime is available.
    """
    container = PostgresContainer(
        image='postgres:16',
        username=config.postgresql.username,
        password=config.postgresql.password,
        dbname=config.postgresql.database,
    )

    try:
        container.start()
    except Exception as e:
        pytest.skip(f'PostgreSQL container unavailable: {e}')

    Setting.unlock()
    config.postgresql.hostname = container.get_container_host_ip()
    config.postgresql.port = int(container.get_exposed_port(5432))
    Setting.lock()

    logger.info(
        f'PostgreSQL container started at '
        f'{config.postgresql.hostname}:{config.postgresql.port}'
    )

    def finalizer():
        try:
            container.stop()
            logger.info('PostgreSQL container stopped')
        except Exception as e:
            logger.warning(f'Error stopping container: {e}')

    request.addfinalizer(finalizer)
    return container


def stage_test_data(db):
    db.query('drop table if exists test_table')
    db.query("""
create table test_table (
    id serial primary key,
    name varchar(50) not null,
    value integer,
    created_at timestamp,
    updated_at timestamp
)
    """)
    db.query("""
insert into test_table (name, value) values
('Alice', 10),
('Bob', 20),
('Charlie', 30)
    """)


@pytest.fixture
def pg_backend(psql_docker):
    """Database on the postgresql backend with a freshly staged test_table."""
    db = sqlfrag.set_backend(
        'postgresql',
        hostname=config.postgresql.hostname,
        username=config.postgresql.username,
        password=config.postgresql.password,
        database=config.postgresql.database,
        port=config.postgresql.port,
        timeout=config.postgresql.timeout,
    )
    stage_test_data(db)
    return db
