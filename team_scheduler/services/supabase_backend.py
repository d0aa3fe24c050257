"""
Supabase table backend for the Team Scheduler.
Stores every entity in the project's Postgres tables through the PostgREST client.
"""

from typing import Any, Dict, List, Optional

from supabase import create_client, Client

from team_scheduler.core.config import SUPABASE_URL, SUPABASE_KEY
from team_scheduler.core.errors import ExternalServiceError
from team_scheduler.core.logging_config import get_logger
from team_scheduler.services.storage import TableBackend

logger = get_logger(__name__)


def get_supabase_client() -> Client:
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set to use Supabase")
    return create_client(SUPABASE_URL, SUPABASE_KEY)


class SupabaseBackend(TableBackend):
    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or get_supabase_client()

    def _execute(self, action: str, table: str, query) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Supabase {action} on '{table}' failed: {e}")
            raise ExternalServiceError("database", f"Database {action} on {table} failed: {e}")
        return response.data or []

    def select(self, table, **filters):
        query = self.client.table(table).select('*')
        for column, value in filters.items():
            query = query.eq(column, value)
        return self._execute("select", table, query)

    def insert(self, table, row):
        data = self._execute("insert", table, self.client.table(table).insert(row))
        return data[0] if data else row

    def update(self, table, row_id, changes):
        data = self._execute("update", table, self.client.table(table).update(changes).eq('id', row_id))
        return data[0] if data else None

    def delete(self, table, row_id):
        data = self._execute("delete", table, self.client.table(table).delete().eq('id', row_id))
        return len(data) > 0

    def delete_where(self, table, column, value):
        data = self._execute("delete", table, self.client.table(table).delete().eq(column, value))
        return len(data)
