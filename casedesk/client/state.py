"""
Local list state for portal views.

Responses are applied in the order they resolve; the last one wins.
"""

from dataclasses import dataclass, field
from typing import Any

from casedesk.client.http import ApiResult
from casedesk.client.resources import CaseApi


@dataclass
class CaseListState:
    cases: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0
    selected_id: str | None = None
    error: str | None = None

    @property
    def selected(self) -> dict[str, Any] | None:
        if self.selected_id is None:
            return None
        return next((c for c in self.cases if c["id"] == self.selected_id), None)

    def select(self, case_id: str | None) -> None:
        self.selected_id = str(case_id) if case_id is not None else None

    def apply(self, result: ApiResult) -> None:
        """Replace the list with a fetched page; keep the old list on failure."""
        if not result.ok:
            self.error = result.error
            return
        self.error = None
        self.cases = list(result.data or [])
        body = result.body if isinstance(result.body, dict) else {}
        self.total = body.get("total", len(self.cases))
        if self.selected_id is not None and self.selected is None:
            self.selected_id = None

    def upsert(self, case: dict[str, Any]) -> None:
        for i, existing in enumerate(self.cases):
            if existing["id"] == case["id"]:
                self.cases[i] = case
                return
        self.cases.insert(0, case)
        self.total += 1

    def remove(self, case_id: str) -> None:
        case_id = str(case_id)
        before = len(self.cases)
        self.cases = [c for c in self.cases if c["id"] != case_id]
        if len(self.cases) < before:
            self.total = max(self.total - 1, 0)
        if self.selected_id == case_id:
            self.selected_id = None

    async def refresh(self, cases: CaseApi, **filters: Any) -> ApiResult:
        result = await cases.list(**filters)
        self.apply(result)
        return result

    async def update(self, cases: CaseApi, case_id: str, changes: dict[str, Any]) -> ApiResult:
        result = await cases.update(case_id, changes)
        if result.ok:
            self.upsert(result.data)
        else:
            self.error = result.error
        return result

    async def delete(self, cases: CaseApi, case_id: str) -> ApiResult:
        """Delete on the server; the row only leaves the list once that succeeds."""
        result = await cases.delete(case_id)
        if result.ok:
            self.remove(case_id)
        else:
            self.error = result.error
        return result
