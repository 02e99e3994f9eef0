# tests/unit/test_timestamps.py
"""The UTC timestamp column type."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import SQLModel

from agent_chat.infrastructure.database import UTCDateTime
from agent_chat.infrastructure.database import models  # noqa: F401


@pytest.mark.unit
class TestUTCDateTime:

    def test_every_timestamp_column_uses_utc_type(self):
        columns = [
            f"{table.name}.{column.name}"
            for table in SQLModel.metadata.sorted_tables
            for column in table.columns
            if column.name.endswith("_at")
        ]

        assert "user_agents.expires_at" in columns
        for name in columns:
            table, column = name.split(".")
            assert isinstance(SQLModel.metadata.tables[table].c[column].type, UTCDateTime), name

    def test_bind_converts_to_utc(self):
        column_type = UTCDateTime()
        local = datetime(2030, 6, 1, 14, tzinfo=timezone(timedelta(hours=2)))

        assert column_type.process_bind_param(local, None) == datetime(2030, 6, 1, 12, tzinfo=timezone.utc)
        assert column_type.process_bind_param(datetime(2030, 6, 1, 12), None).tzinfo is timezone.utc
        assert column_type.process_bind_param(None, None) is None

    def test_naive_result_tagged_utc(self):
        loaded = UTCDateTime().process_result_value(datetime(2030, 6, 1, 12), None)

        assert loaded == datetime(2030, 6, 1, 12, tzinfo=timezone.utc)
