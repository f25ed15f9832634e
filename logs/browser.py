"""
Log browser: paginated views and TXT exports over the message archive.

The browser is stateless. The page a user is looking at lives only in
the navigation buttons (see logs.callbacks), so paging survives restarts.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Tuple

from config import EXPORT_MAX_ROWS, PAGE_SIZE
from config.help_texts import HELP_TEXTS
from logs.scope import ChatScope, Scope
from storage.archive import EVENT_EDIT, MessageArchive, archive
from storage.models import Message
from utils.formatters import format_timestamp

UNKNOWN_GROUP = "Неизвестная группа"


@dataclass
class LogPage:
    title: str
    entries: List[Message]
    page: int
    has_prev: bool
    has_next: bool

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class ExportStats:
    total: int
    edits: int
    authors: FrozenSet[Tuple[str, Optional[int]]] = field(default_factory=frozenset)

    @property
    def author_count(self) -> int:
        return len(self.authors)


@dataclass
class ExportPayload:
    title: str
    header: ExportStats
    body: str
    filename: str

    def to_text(self, generated_at: str = "") -> str:
        authors = ", ".join(
            f"{name} ({user_id})" for name, user_id in sorted(self.header.authors, key=lambda a: (a[0], a[1] or 0))
        )
        lines = [
            f"Экспорт логов: {self.title}",
        ]
        if generated_at:
            lines.append(f"Сформировано: {generated_at}")
        lines += [
            f"Записей: {self.header.total}, правок: {self.header.edits}, авторов: {self.header.author_count}",
            f"Авторы: {authors}",
            "",
            self.body,
        ]
        return "\n".join(lines)


def export_line(row: Message) -> str:
    name = row.first_name or "Без имени"
    line = f"[{format_timestamp(row.created_at)}] {name}: {row.content}"
    if row.event == EVENT_EDIT:
        line += f"\n   (было: {row.original_content})"
    return line


class LogBrowser:
    """
    Args:
        archive: message archive to read from
        page_size: entries per page
        export_max_rows: newest rows included in an export
    """

    def __init__(self, archive: MessageArchive, page_size: int = PAGE_SIZE, export_max_rows: int = EXPORT_MAX_ROWS):
        self.archive = archive
        self.page_size = page_size
        self.export_max_rows = export_max_rows

    async def scope_title(self, scope: Scope) -> str:
        if isinstance(scope, ChatScope):
            title = await self.archive.chat_title(scope.chat_id)
            return f"Логи группы: {title or UNKNOWN_GROUP}"
        return f"Логи пользователя: {scope.label}"

    async def render_page(self, scope: Scope, page: int, chat_ids: Optional[Iterable[int]] = None) -> LogPage:
        """
        Build one page, newest entries first.

        Pages are 1-based; anything below 1 is treated as 1. A page past
        the end has no entries and a "no records" title. chat_ids, when
        given, hides rows from any other chat.
        """
        page = max(int(page), 1)
        offset = (page - 1) * self.page_size

        # One extra row tells us whether a next page exists
        rows = await self.archive.query_page(scope, offset, self.page_size + 1, chat_ids)
        entries = rows[:self.page_size]

        title = await self.scope_title(scope)
        if not entries:
            title = f"{title} — {HELP_TEXTS['logs']['no_records']}"

        return LogPage(
            title=title,
            entries=entries,
            page=page,
            has_prev=page > 1,
            has_next=len(rows) > self.page_size,
        )

    async def render_export(self, scope: Scope, chat_ids: Optional[Iterable[int]] = None) -> ExportPayload:
        """
        Whole scope (capped at export_max_rows newest rows), oldest first.

        Statistics cover exactly the exported rows.
        """
        rows = await self.archive.query_all(scope, self.export_max_rows, chat_ids)
        stats = ExportStats(
            total=len(rows),
            edits=sum(1 for row in rows if row.event == EVENT_EDIT),
            authors=frozenset((row.first_name or "Без имени", row.user_id) for row in rows),
        )
        return ExportPayload(
            title=await self.scope_title(scope),
            header=stats,
            body="\n".join(export_line(row) for row in rows),
            filename=f"log_{scope.kind}_{scope.token}.txt",
        )


log_browser = LogBrowser(archive)
