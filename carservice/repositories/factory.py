from carservice.repositories.base import BillRepository


def get_bill_repository() -> BillRepository:
    from carservice.db import get_connection
    from carservice.repositories.sqlalchemy import SQLAlchemyBillRepository

    return SQLAlchemyBillRepository(get_connection())
