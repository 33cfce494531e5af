"""
タスクのドメインエンティティ
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def next_timestamp(previous: Optional[datetime]) -> datetime:
    """
    現在時刻を返す。直前の値から時計が進んでいない場合は1マイクロ秒進める。
    """
    now = utc_now()
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


@dataclass
class Task:
    """
    タスクのビジネスドメインモデル

    id が 0 のタスクはまだ永続化されていない。
    """
    title: str
    description: str
    id: int = 0
    completed: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, title: str, description: str) -> "Task":
        """新しいタスクを生成する（作成日時と更新日時は同一）"""
        now = utc_now()
        return cls(
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    def mark_as_completed(self) -> None:
        self.completed = True
        self._touch()

    def mark_as_uncompleted(self) -> None:
        self.completed = False
        self._touch()

    def update(self, title: str, description: str) -> None:
        """
        空でない値だけを上書きする。更新日時は常に更新される。
        """
        if title != "":
            self.title = title
        if description != "":
            self.description = description
        self._touch()

    def is_valid(self) -> bool:
        # 空白のみの文字列は有効として扱う
        return self.title != "" and self.description != ""

    def _touch(self) -> None:
        self.updated_at = next_timestamp(self.updated_at)
