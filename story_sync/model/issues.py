from typing import Dict, Iterable, List, Optional, Tuple

from .entities import ChapterIssue


class IssueLog:
    """Data defects found while building a timeline, keyed by (chapter index, field)."""

    def __init__(self) -> None:
        self._issues: Dict[Tuple[int, str], ChapterIssue] = {}

    def record_issue(self, issue: ChapterIssue) -> bool:
        key = (issue.index, issue.field)
        existing = self._issues.get(key)
        if existing:
            updated = False
            if existing.value != issue.value:
                existing.value = issue.value
                updated = True
            if existing.note != issue.note:
                existing.note = issue.note
                updated = True
            return updated
        self._issues[key] = issue
        return True

    def clear(self) -> None:
        self._issues.clear()

    def issues(self) -> Iterable[ChapterIssue]:
        return self._issues.values()

    def find(self, index: int, field: str) -> Optional[ChapterIssue]:
        return self._issues.get((index, field))

    def for_chapter(self, index: int) -> List[ChapterIssue]:
        found = [issue for key, issue in self._issues.items() if key[0] == index]
        found.sort(key=lambda issue: issue.field)
        return found

    def __len__(self) -> int:
        return len(self._issues)
