from abc import ABC, abstractmethod

from carservice.models.bill import Bill, BillNumber


class BillRepository(ABC):
    @abstractmethod
    def create(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def get_by_id(self, bill_id: int) -> Bill: ...

    @abstractmethod
    def list_all(self) -> list[Bill]: ...

    @abstractmethod
    def update(self, bill: Bill) -> Bill: ...

    @abstractmethod
    def delete(self, bill_id: int) -> None: ...

    @abstractmethod
    def get_latest_number(self) -> BillNumber | None: ...
