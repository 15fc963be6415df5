import pytest
from sqlalchemy import Connection

from carservice.repositories.sqlalchemy import SQLAlchemyBillRepository


@pytest.fixture()
def bill_repo(db_connection: Connection) -> SQLAlchemyBillRepository:
    return SQLAlchemyBillRepository(db_connection)
