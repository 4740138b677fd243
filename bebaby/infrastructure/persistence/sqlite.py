import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from ...domain.errors import ConflictError, NotFoundError, StorageError
from ...domain.models import (
    ContentStatus,
    ContentType,
    Conversation,
    Message,
    Notification,
    PendingContent,
    Report,
    ReportAction,
    ReportStatus,
    User,
    UserStatus,
    UserType,
)
from ...domain.models.content import MODERATED_TEXT_FIELDS
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

_PROFILE_COLUMNS = {
    "name",
    "about",
    "looking_for",
    "state",
    "city",
    "education",
    "profession",
    "photo_url",
}


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    username TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    name TEXT,
                    birthdate TEXT,
                    gender TEXT,
                    user_type TEXT NOT NULL,
                    looking_for TEXT,
                    state TEXT,
                    city TEXT,
                    about TEXT,
                    photo_url TEXT,
                    education TEXT,
                    profession TEXT,
                    email_verified INTEGER NOT NULL DEFAULT 0,
                    verified INTEGER NOT NULL DEFAULT 0,
                    is_admin INTEGER NOT NULL DEFAULT 0,
                    premium INTEGER NOT NULL DEFAULT 0,
                    premium_expiry TEXT,
                    status TEXT NOT NULL DEFAULT 'ACTIVE',
                    status_reason TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_users_state ON users(state);

                CREATE TABLE IF NOT EXISTS reports (
                    id TEXT PRIMARY KEY,
                    reporter_id TEXT NOT NULL,
                    reported_id TEXT NOT NULL,
                    reason TEXT NOT NULL,
                    description TEXT,
                    status TEXT NOT NULL DEFAULT 'PENDING',
                    reviewed INTEGER NOT NULL DEFAULT 0,
                    action_taken TEXT,
                    admin_notes TEXT,
                    reviewed_at TEXT,
                    version INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(reporter_id) REFERENCES users(id),
                    FOREIGN KEY(reported_id) REFERENCES users(id)
                );

                CREATE INDEX IF NOT EXISTS idx_reports_pair
                    ON reports(reporter_id, reported_id, created_at);

                CREATE TABLE IF NOT EXISTS pending_content (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    content_type TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'PENDING',
                    photo_url TEXT,
                    field TEXT,
                    content TEXT,
                    created_at TEXT NOT NULL,
                    decided_at TEXT,
                    FOREIGN KEY(user_id) REFERENCES users(id)
                );

                CREATE TABLE IF NOT EXISTS notifications (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    message TEXT NOT NULL,
                    type TEXT NOT NULL,
                    read INTEGER NOT NULL DEFAULT 0,
                    dedupe_key TEXT,
                    created_at TEXT NOT NULL,
                    UNIQUE(user_id, dedupe_key),
                    FOREIGN KEY(user_id) REFERENCES users(id)
                );

                CREATE INDEX IF NOT EXISTS idx_notifications_user_created
                    ON notifications(user_id, created_at DESC);

                CREATE TABLE IF NOT EXISTS conversations (
                    id TEXT PRIMARY KEY,
                    participant_a TEXT NOT NULL,
                    participant_b TEXT NOT NULL,
                    last_message TEXT,
                    last_message_at TEXT,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(participant_a) REFERENCES users(id),
                    FOREIGN KEY(participant_b) REFERENCES users(id)
                );

                CREATE TABLE IF NOT EXISTS messages (
                    id TEXT PRIMARY KEY,
                    conversation_id TEXT NOT NULL,
                    sender_id TEXT NOT NULL,
                    receiver_id TEXT NOT NULL,
                    content TEXT NOT NULL,
                    read INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(conversation_id) REFERENCES conversations(id) ON DELETE CASCADE
                );

                CREATE INDEX IF NOT EXISTS idx_messages_conversation
                    ON messages(conversation_id, created_at);
                """
            )

    def close(self) -> None:
        self._conn.close()

    # Plumbing ---------------------------------------------------------------
    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.IntegrityError as exc:
                raise self._translate_integrity_error(exc) from exc
            except sqlite3.Error as exc:
                logger.error("SQLite write failed: %s", exc)
                raise StorageError("Storage operation failed.") from exc

    def _fetchone(self, query: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        with self._lock:
            try:
                return self._conn.execute(query, params).fetchone()
            except sqlite3.Error as exc:
                logger.error("SQLite read failed: %s", exc)
                raise StorageError("Storage operation failed.") from exc

    def _fetchall(self, query: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        with self._lock:
            try:
                return self._conn.execute(query, params).fetchall()
            except sqlite3.Error as exc:
                logger.error("SQLite read failed: %s", exc)
                raise StorageError("Storage operation failed.") from exc

    @staticmethod
    def _translate_integrity_error(exc: sqlite3.IntegrityError) -> Exception:
        text = str(exc)
        if "UNIQUE" in text:
            if "users." in text:
                return ConflictError("Username or email already registered.")
            return ConflictError("Record already exists.")
        if "FOREIGN KEY" in text:
            return NotFoundError("Referenced record not found.")
        return ConflictError("Constraint violation.")

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    # UserRepository API ----------------------------------------------------
    def create_user(
        self,
        *,
        email: str,
        username: str,
        password_hash: str,
        user_type: UserType,
        name: Optional[str] = None,
        birthdate: Optional[date] = None,
        gender: Optional[str] = None,
        looking_for: Optional[str] = None,
        state: Optional[str] = None,
        city: Optional[str] = None,
        is_admin: bool = False,
        verified: bool = False,
        email_verified: bool = False,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> User:
        user_id = self._new_id()
        now = self._now()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, username, password_hash, name, birthdate, gender,
                    user_type, looking_for, state, city, email_verified, verified,
                    is_admin, status, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    email.lower(),
                    username,
                    password_hash,
                    name,
                    birthdate.isoformat() if birthdate else None,
                    gender,
                    user_type.value,
                    looking_for,
                    state,
                    city,
                    int(email_verified),
                    int(verified),
                    int(is_admin),
                    status.value,
                    now,
                    now,
                ),
            )
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise StorageError("Failed to persist user.")
        return self._row_to_user(row)

    def get_user(self, user_id: str) -> Optional[User]:
        row = self._fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        return self._row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self._fetchone("SELECT * FROM users WHERE email = ?", (email.lower(),))
        return self._row_to_user(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        row = self._fetchone("SELECT * FROM users WHERE username = ?", (username,))
        return self._row_to_user(row) if row else None

    def update_user_profile(self, user_id: str, **fields: Any) -> User:
        unknown = set(fields) - _PROFILE_COLUMNS
        if unknown:
            raise ValueError(f"Unsupported profile fields: {', '.join(sorted(unknown))}")
        updates = [f"{column} = ?" for column in fields]
        params: List[Any] = list(fields.values())
        updates.append("updated_at = ?")
        params.append(self._now())
        params.append(user_id)
        with self._transaction() as conn:
            conn.execute(f"UPDATE users SET {', '.join(updates)} WHERE id = ?", params)
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise NotFoundError("User not found.")
        return self._row_to_user(row)

    def set_user_status(self, user_id: str, status: UserStatus, reason: Optional[str]) -> User:
        with self._transaction() as conn:
            conn.execute(
                "UPDATE users SET status = ?, status_reason = ?, updated_at = ? WHERE id = ?",
                (status.value, reason, self._now(), user_id),
            )
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise NotFoundError("User not found.")
        return self._row_to_user(row)

    def set_user_premium(self, user_id: str, premium: bool, expiry: Optional[datetime]) -> User:
        with self._transaction() as conn:
            conn.execute(
                "UPDATE users SET premium = ?, premium_expiry = ?, updated_at = ? WHERE id = ?",
                (int(premium), self._format_datetime(expiry), self._now(), user_id),
            )
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise NotFoundError("User not found.")
        return self._row_to_user(row)

    def list_users_by_state(
        self,
        state: str,
        *,
        exclude_user_id: Optional[str],
        limit: int,
        offset: int = 0,
    ) -> List[User]:
        query = "SELECT * FROM users WHERE state = ?"
        params: List[Any] = [state]
        if exclude_user_id:
            query += " AND id != ?"
            params.append(exclude_user_id)
        query += " ORDER BY created_at ASC, id ASC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        return [self._row_to_user(row) for row in self._fetchall(query, params)]

    def list_premium_users(self) -> List[User]:
        rows = self._fetchall("SELECT * FROM users WHERE premium = 1 ORDER BY updated_at DESC")
        return [self._row_to_user(row) for row in rows]

    def search_users(
        self,
        *,
        text: Optional[str] = None,
        user_type: Optional[UserType] = None,
        status: Optional[UserStatus] = None,
        premium: Optional[bool] = None,
        verified: Optional[bool] = None,
        state: Optional[str] = None,
        city: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        clauses: List[str] = []
        params: List[Any] = []
        if text:
            pattern = "%" + text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_") + "%"
            columns = ("name", "username", "email", "city", "state")
            clauses.append("(" + " OR ".join(f"{column} LIKE ? ESCAPE '\\'" for column in columns) + ")")
            params.extend([pattern] * len(columns))
        if user_type is not None:
            clauses.append("user_type = ?")
            params.append(user_type.value)
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if premium is not None:
            clauses.append("premium = ?")
            params.append(int(premium))
        if verified is not None:
            clauses.append("verified = ?")
            params.append(int(verified))
        if state:
            clauses.append("state = ?")
            params.append(state)
        if city:
            clauses.append("city = ?")
            params.append(city)

        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        total = self._fetchone(f"SELECT COUNT(*) FROM users{where}", params)[0]
        rows = self._fetchall(
            f"SELECT * FROM users{where} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
            [*params, limit, offset],
        )
        return [self._row_to_user(row) for row in rows], total

    # ReportRepository API --------------------------------------------------
    def create_report(
        self,
        reporter_id: str,
        reported_id: str,
        reason: str,
        description: Optional[str],
    ) -> Report:
        report_id = self._new_id()
        now = self._now()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO reports (
                    id, reporter_id, reported_id, reason, description, status,
                    reviewed, version, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, 'PENDING', 0, 0, ?, ?)
                """,
                (report_id, reporter_id, reported_id, reason, description, now, now),
            )
            row = conn.execute("SELECT * FROM reports WHERE id = ?", (report_id,)).fetchone()
        if not row:
            raise StorageError("Failed to persist report.")
        return self._row_to_report(row)

    def get_report(self, report_id: str) -> Optional[Report]:
        row = self._fetchone("SELECT * FROM reports WHERE id = ?", (report_id,))
        return self._row_to_report(row) if row else None

    def find_recent_report(self, reporter_id: str, reported_id: str, since: datetime) -> Optional[Report]:
        row = self._fetchone(
            """
            SELECT * FROM reports
            WHERE reporter_id = ? AND reported_id = ? AND created_at > ?
            ORDER BY created_at DESC LIMIT 1
            """,
            (reporter_id, reported_id, self._format_datetime(since)),
        )
        return self._row_to_report(row) if row else None

    def list_reports(self, status: Optional[ReportStatus] = None) -> List[Report]:
        query = "SELECT * FROM reports"
        params: List[Any] = []
        if status is not None:
            query += " WHERE status = ?"
            params.append(status.value)
        query += " ORDER BY created_at DESC, rowid DESC"
        return [self._row_to_report(row) for row in self._fetchall(query, params)]

    def apply_report_action(
        self,
        report_id: str,
        *,
        expected_version: int,
        action: ReportAction,
        admin_notes: Optional[str],
        report_status: ReportStatus,
        user_status: Optional[UserStatus],
    ) -> Report:
        now = self._now()
        with self._transaction() as conn:
            cur = conn.execute(
                """
                UPDATE reports
                SET status = ?, reviewed = 1, action_taken = ?, admin_notes = ?,
                    reviewed_at = ?, updated_at = ?, version = version + 1
                WHERE id = ? AND version = ? AND status = 'PENDING'
                """,
                (report_status.value, action.value, admin_notes, now, now, report_id, expected_version),
            )
            if cur.rowcount == 0:
                # Rolls back the transaction; nothing else was written.
                raise ConflictError("Report was already resolved or changed by another request.")
            if user_status is not None:
                cur = conn.execute(
                    """
                    UPDATE users SET status = ?, status_reason = ?, updated_at = ?
                    WHERE id = (SELECT reported_id FROM reports WHERE id = ?)
                    """,
                    (user_status.value, admin_notes or "User report", now, report_id),
                )
                if cur.rowcount == 0:
                    raise NotFoundError("Reported user not found.")
            row = conn.execute("SELECT * FROM reports WHERE id = ?", (report_id,)).fetchone()
        return self._row_to_report(row)

    def delete_report(self, report_id: str) -> bool:
        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM reports WHERE id = ?", (report_id,))
            return cur.rowcount > 0

    # ContentRepository API -------------------------------------------------
    def create_pending_content(
        self,
        user_id: str,
        content_type: ContentType,
        *,
        photo_url: Optional[str] = None,
        field: Optional[str] = None,
        content: Optional[str] = None,
    ) -> PendingContent:
        content_id = self._new_id()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO pending_content (
                    id, user_id, content_type, status, photo_url, field, content, created_at
                )
                VALUES (?, ?, ?, 'PENDING', ?, ?, ?, ?)
                """,
                (content_id, user_id, content_type.value, photo_url, field, content, self._now()),
            )
            row = conn.execute("SELECT * FROM pending_content WHERE id = ?", (content_id,)).fetchone()
        if not row:
            raise StorageError("Failed to persist pending content.")
        return self._row_to_content(row)

    def get_pending_content(self, content_id: str) -> Optional[PendingContent]:
        row = self._fetchone("SELECT * FROM pending_content WHERE id = ?", (content_id,))
        return self._row_to_content(row) if row else None

    def list_pending_content(self, content_type: Optional[ContentType] = None) -> List[PendingContent]:
        query = "SELECT * FROM pending_content WHERE status = 'PENDING'"
        params: List[Any] = []
        if content_type is not None:
            query += " AND content_type = ?"
            params.append(content_type.value)
        query += " ORDER BY created_at ASC, rowid ASC"
        return [self._row_to_content(row) for row in self._fetchall(query, params)]

    def decide_content(self, content_id: str, status: ContentStatus) -> PendingContent:
        now = self._now()
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE pending_content SET status = ?, decided_at = ? WHERE id = ? AND status = 'PENDING'",
                (status.value, now, content_id),
            )
            if cur.rowcount == 0:
                raise ConflictError("Content was already moderated.")
            row = conn.execute("SELECT * FROM pending_content WHERE id = ?", (content_id,)).fetchone()
            item = self._row_to_content(row)
            if status is ContentStatus.APPROVED:
                self._apply_approved_content(conn, item, now)
        return item

    @staticmethod
    def _apply_approved_content(conn: sqlite3.Connection, item: PendingContent, now: str) -> None:
        if item.content_type is ContentType.TEXT:
            if item.field not in MODERATED_TEXT_FIELDS:
                raise ConflictError(f"Unsupported profile field: {item.field}")
            conn.execute(
                f"UPDATE users SET {item.field} = ?, updated_at = ? WHERE id = ?",
                (item.content, now, item.user_id),
            )
        elif item.photo_url:
            conn.execute(
                """
                UPDATE users SET photo_url = ?, updated_at = ?
                WHERE id = ? AND (photo_url IS NULL OR photo_url = '')
                """,
                (item.photo_url, now, item.user_id),
            )

    # NotificationRepository API --------------------------------------------
    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str,
        dedupe_key: Optional[str] = None,
    ) -> Optional[Notification]:
        notification_id = self._new_id()
        with self._transaction() as conn:
            cur = conn.execute(
                """
                INSERT OR IGNORE INTO notifications (
                    id, user_id, title, message, type, read, dedupe_key, created_at
                )
                VALUES (?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (notification_id, user_id, title, message, type, dedupe_key, self._now()),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute("SELECT * FROM notifications WHERE id = ?", (notification_id,)).fetchone()
        return self._row_to_notification(row)

    def list_notifications(self, user_id: str, limit: int, offset: int = 0) -> List[Notification]:
        rows = self._fetchall(
            """
            SELECT * FROM notifications WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC LIMIT ? OFFSET ?
            """,
            (user_id, limit, offset),
        )
        return [self._row_to_notification(row) for row in rows]

    def mark_notification_read(self, notification_id: str, user_id: str) -> bool:
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE notifications SET read = 1 WHERE id = ? AND user_id = ?",
                (notification_id, user_id),
            )
            return cur.rowcount > 0

    def mark_all_notifications_read(self, user_id: str) -> int:
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE notifications SET read = 1 WHERE user_id = ? AND read = 0",
                (user_id,),
            )
            return cur.rowcount

    # ConversationRepository API --------------------------------------------
    def create_conversation(self, conversation_id: str, user_a: str, user_b: str) -> Tuple[Conversation, bool]:
        first, second = sorted((user_a, user_b))
        with self._transaction() as conn:
            cur = conn.execute(
                """
                INSERT OR IGNORE INTO conversations (id, participant_a, participant_b, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (conversation_id, first, second, self._now()),
            )
            created = cur.rowcount > 0
            row = conn.execute("SELECT * FROM conversations WHERE id = ?", (conversation_id,)).fetchone()
        return self._row_to_conversation(row), created

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        row = self._fetchone("SELECT * FROM conversations WHERE id = ?", (conversation_id,))
        return self._row_to_conversation(row) if row else None

    def add_message(self, conversation_id: str, sender_id: str, receiver_id: str, content: str) -> Message:
        message_id = self._new_id()
        now = self._now()
        with self._transaction() as conn:
            conn.execute(
                """
                INSERT INTO messages (id, conversation_id, sender_id, receiver_id, content, read, created_at)
                VALUES (?, ?, ?, ?, ?, 0, ?)
                """,
                (message_id, conversation_id, sender_id, receiver_id, content, now),
            )
            conn.execute(
                "UPDATE conversations SET last_message = ?, last_message_at = ? WHERE id = ?",
                (content, now, conversation_id),
            )
            row = conn.execute("SELECT * FROM messages WHERE id = ?", (message_id,)).fetchone()
        return self._row_to_message(row)

    def list_messages(self, conversation_id: str, limit: int) -> List[Message]:
        rows = self._fetchall(
            """
            SELECT * FROM messages WHERE conversation_id = ?
            ORDER BY created_at ASC, rowid ASC LIMIT ?
            """,
            (conversation_id, limit),
        )
        return [self._row_to_message(row) for row in rows]

    def mark_messages_read(self, conversation_id: str, receiver_id: str) -> int:
        with self._transaction() as conn:
            cur = conn.execute(
                "UPDATE messages SET read = 1 WHERE conversation_id = ? AND receiver_id = ? AND read = 0",
                (conversation_id, receiver_id),
            )
            return cur.rowcount

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat(timespec="microseconds")

    @staticmethod
    def _format_datetime(value: Optional[datetime]) -> Optional[str]:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")

    @staticmethod
    def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
        if not value:
            return None
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            username=row["username"],
            password_hash=row["password_hash"],
            name=row["name"],
            birthdate=date.fromisoformat(row["birthdate"]) if row["birthdate"] else None,
            gender=row["gender"],
            user_type=UserType(row["user_type"]),
            looking_for=row["looking_for"],
            state=row["state"],
            city=row["city"],
            about=row["about"],
            photo_url=row["photo_url"],
            education=row["education"],
            profession=row["profession"],
            email_verified=bool(row["email_verified"]),
            verified=bool(row["verified"]),
            is_admin=bool(row["is_admin"]),
            premium=bool(row["premium"]),
            premium_expiry=self._parse_datetime(row["premium_expiry"]),
            status=UserStatus(row["status"]),
            status_reason=row["status_reason"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_report(self, row: sqlite3.Row) -> Report:
        return Report(
            id=row["id"],
            reporter_id=row["reporter_id"],
            reported_id=row["reported_id"],
            reason=row["reason"],
            description=row["description"],
            status=ReportStatus(row["status"]),
            reviewed=bool(row["reviewed"]),
            action_taken=ReportAction(row["action_taken"]) if row["action_taken"] else None,
            admin_notes=row["admin_notes"],
            reviewed_at=self._parse_datetime(row["reviewed_at"]),
            version=row["version"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_content(self, row: sqlite3.Row) -> PendingContent:
        return PendingContent(
            id=row["id"],
            user_id=row["user_id"],
            content_type=ContentType(row["content_type"]),
            status=ContentStatus(row["status"]),
            photo_url=row["photo_url"],
            field=row["field"],
            content=row["content"],
            created_at=self._parse_datetime(row["created_at"]),
            decided_at=self._parse_datetime(row["decided_at"]),
        )

    def _row_to_notification(self, row: sqlite3.Row) -> Notification:
        return Notification(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            message=row["message"],
            type=row["type"],
            read=bool(row["read"]),
            dedupe_key=row["dedupe_key"],
            created_at=self._parse_datetime(row["created_at"]),
        )

    def _row_to_conversation(self, row: sqlite3.Row) -> Conversation:
        return Conversation(
            id=row["id"],
            participants=(row["participant_a"], row["participant_b"]),
            last_message=row["last_message"],
            last_message_at=self._parse_datetime(row["last_message_at"]),
            created_at=self._parse_datetime(row["created_at"]),
        )

    def _row_to_message(self, row: sqlite3.Row) -> Message:
        return Message(
            id=row["id"],
            conversation_id=row["conversation_id"],
            sender_id=row["sender_id"],
            receiver_id=row["receiver_id"],
            content=row["content"],
            read=bool(row["read"]),
            created_at=self._parse_datetime(row["created_at"]),
        )
