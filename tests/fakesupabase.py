# In-process stand-in for the async Supabase client (tables held in memory)
import asyncio


class FakeResult:
    def __init__(self, data):
        self.data = data
        self.count = len(data)


class FakeQuery:
    def __init__(self, db, name):
        self._db = db
        self._name = name
        self._filters = []
        self._op = "select"
        self._payload = None
        self._order = None
        self._limit = None

    def select(self, *args, **kwargs):
        self._op = "select"
        return self

    def eq(self, field, value):
        self._filters.append(lambda r: r.get(field) == value)
        return self

    def order(self, field, desc=False):
        self._order = (field, desc)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def upsert(self, row, on_conflict="id"):
        self._op = "upsert"
        self._payload = dict(row)
        return self

    def delete(self):
        self._op = "delete"
        return self

    async def execute(self):
        self._db.calls.append((self._name, self._op))
        if self._db.hang:
            await asyncio.sleep(3600)
        if self._db.fail is not None:
            raise self._db.fail

        rows = self._db.tables.setdefault(self._name, [])
        if self._op == "upsert":
            for idx, existing in enumerate(rows):
                if existing.get("id") == self._payload.get("id"):
                    rows[idx] = self._payload
                    break
            else:
                rows.append(self._payload)
            return FakeResult([dict(self._payload)])

        matched = [r for r in rows if all(f(r) for f in self._filters)]
        if self._op == "delete":
            self._db.tables[self._name] = [r for r in rows if r not in matched]
            return FakeResult(matched)

        if self._order:
            field, desc = self._order
            matched = sorted(matched, key=lambda r: str(r.get(field) or ""), reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]
        return FakeResult([dict(r) for r in matched])


class FakeAsyncSupabase:
    """``fail`` (an exception) or ``hang`` simulate an unreachable backend."""

    def __init__(self, tables=None):
        self.tables = {name: list(rows) for name, rows in (tables or {}).items()}
        self.fail = None
        self.hang = False
        self.calls = []

    def table(self, name: str):
        return FakeQuery(self, name)
