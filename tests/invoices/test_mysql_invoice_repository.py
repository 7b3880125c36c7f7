from __future__ import annotations

from src.recruit_portal.recruit_portal.invoices.mysql_invoice_repository import MySQLInvoiceRepository


class FakeCursor:
    def __init__(self, rows):
        self.executed = []
        self._rows = rows

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, cursor):
        self._cursor = cursor

    def connect(self, *, with_database=True):
        factory = self

        class _Conn:
            def cursor(self, dictionary=True):
                return factory._cursor

            def commit(self):
                pass

            def rollback(self):
                pass

            def close(self):
                pass

        return _Conn()


def test_last_number_for_month_orders_by_sequence_not_text():
    rows = [{"invoice_number": "INV-202401-9999"}, {"invoice_number": "INV-202401-10000"}]
    cursor = FakeCursor(rows)

    last = MySQLInvoiceRepository(FakeConnectionFactory(cursor)).last_number_for_month("INV-202401-")

    assert last == "INV-202401-10000"
    assert cursor.executed[0][1] == ("INV-202401-%",)


def test_last_number_for_empty_month_is_none():
    repo = MySQLInvoiceRepository(FakeConnectionFactory(FakeCursor([])))

    assert repo.last_number_for_month("INV-202402-") is None
