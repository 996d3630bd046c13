import unittest
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from listquery.models.customer import Customer
from listquery.services.compiler import compile_predicate, sort_records
from listquery.services.field_index import build_index
from listquery.services.query_parser import parse
from listquery.services.sql_compiler import apply_filter_specification, compile_where_clause
from tests.base import CustomerDatabaseBase


class SqlCompilerTests(CustomerDatabaseBase):
    def _ids(self, raw_query: str, default_sort: str = "id") -> list[int]:
        spec = parse(raw_query, Customer, default_sort)
        q = apply_filter_specification(self.db.query(Customer), Customer, spec)
        return [row.id for row in q.all()]

    def test_no_filters_returns_all_rows(self):
        self.assertEqual(self._ids(""), [1, 2, 3, 4, 5])

    def test_values_or_fields_and(self):
        self.assertEqual(self._ids("status=Active|Pending||eq"), [1, 2, 4, 5])
        self.assertEqual(self._ids("status=Active|Pending||eq&is_partner=false||eq"), [2, 5])

    def test_text_equals_is_case_insensitive(self):
        self.assertEqual(self._ids("status=active||eq"), [1, 4])

    def test_not_equals_keeps_null_rows(self):
        self.assertEqual(self._ids("email=sales@acme.test||neq"), [2, 3, 4, 5])

    def test_contains_escapes_like_wildcards(self):
        self.assertEqual(self._ids("email=acme||contains"), [1, 4])
        self.assertEqual(self._ids("name=%||contains"), [])

    def test_ordering_operators_on_dates(self):
        self.assertEqual(self._ids("signedOn=2021-01-01||gte"), [1, 2, 5])

    def test_quick_search_default_and_restricted_scope(self):
        self.assertEqual(self._ids("query=acme"), [1, 4])
        self.assertEqual(self._ids("query=acme||name"), [1])
        self.assertEqual(self._ids("query=98"), [4])

    def test_sort_desc_with_identifier_tiebreak(self):
        self.assertEqual(self._ids("sortBy=employees&sortDirection=desc"), [4, 1, 2, 5, 3])

    def test_nulls_sort_first_ascending(self):
        self.assertEqual(self._ids("sortBy=signed_on")[0], 3)
        self.assertEqual(self._ids("sortBy=signed_on&sortDirection=desc")[-1], 3)

    def test_where_clause_counts(self):
        spec = parse("status=Pending||eq", Customer, "name")
        self.assertEqual(self.db.query(Customer).filter(compile_where_clause(Customer, spec)).count(), 2)

    def test_sql_and_in_memory_compilers_agree(self):
        rows = self.db.query(Customer).all()
        index = build_index(Customer)
        queries = [
            "status=Active|Pending||eq",
            "email=sales@acme.test||neq",
            "email=ACME||contains&employees=100||gt",
            "employees=45||lte&sortBy=name&sortDirection=desc",
            "query=o||name|email",
            "code=u||startswith",
            "signed_on=2022-01-12||eq",
        ]
        for raw in queries:
            with self.subTest(raw=raw):
                spec = parse(raw, index, "id")
                predicate = compile_predicate(spec, index)
                in_memory = [row.id for row in sort_records([r for r in rows if predicate(r)], spec.sort, index)]
                self.assertEqual(self._ids(raw), in_memory)


class _ApplyBase(DeclarativeBase):
    pass


class _ApplyQueryModel(_ApplyBase):
    __tablename__ = "_lq_apply_test_model"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False))


class DateTimeFilterTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine("sqlite+pysqlite:///:memory:")
        _ApplyBase.metadata.create_all(cls.engine)
        with Session(cls.engine) as session:
            session.add_all(
                [
                    _ApplyQueryModel(id=1, title="prev-day", created_at=datetime(2026, 2, 25, 23, 59, 59)),
                    _ApplyQueryModel(id=2, title="same-day-morning", created_at=datetime(2026, 2, 26, 9, 30, 0)),
                    _ApplyQueryModel(id=3, title="same-day-evening", created_at=datetime(2026, 2, 26, 23, 59, 59)),
                    _ApplyQueryModel(id=4, title="next-day", created_at=datetime(2026, 2, 27, 0, 0, 0)),
                ]
            )
            session.commit()

    @classmethod
    def tearDownClass(cls):
        cls.engine.dispose()

    def _ids(self, raw_query: str) -> list[int]:
        with Session(self.engine) as session:
            spec = parse(raw_query, _ApplyQueryModel, "id")
            q = apply_filter_specification(session.query(_ApplyQueryModel), _ApplyQueryModel, spec)
            return [row.id for row in q.all()]

    def test_datetime_equal_date_uses_day_range(self):
        self.assertEqual(self._ids("created_at=2026-02-26||eq"), [2, 3])

    def test_datetime_not_equal_date_excludes_whole_day(self):
        self.assertEqual(self._ids("createdAt=2026-02-26||neq"), [1, 4])

    def test_datetime_equal_full_timestamp_stays_exact(self):
        self.assertEqual(self._ids("created_at=2026-02-26T09:30:00||eq"), [2])

    def test_datetime_ordering(self):
        self.assertEqual(self._ids("created_at=2026-02-26||gte&sortDirection=desc"), [4, 3, 2])


if __name__ == "__main__":
    unittest.main()
