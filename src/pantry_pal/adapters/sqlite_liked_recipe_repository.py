"""On-device liked recipe storage backed by SQLite."""

import sqlite3
from datetime import datetime
from pathlib import Path

from pantry_pal.domain.models import LikedRecipe
from pantry_pal.services.hub import LikedRecipeRepository

_MEMORY = ":memory:"

_DDL = """
CREATE TABLE IF NOT EXISTS liked_recipes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    recipe_id INTEGER NOT NULL,
    title TEXT,
    image TEXT,
    date_added TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_liked_recipes_date ON liked_recipes(date_added);
"""


def ensure_schema(db_path: str | Path) -> sqlite3.Connection:
    """Open (or create) the database and apply the schema."""
    if str(db_path) == _MEMORY:
        target = _MEMORY
    else:
        path = Path(db_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        target = str(path)
    conn = sqlite3.connect(target, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.executescript(_DDL)
    conn.commit()
    return conn


class SqliteLikedRecipeRepository(LikedRecipeRepository):
    """Manages the liked_recipes table."""

    def __init__(self, db_path: str | Path = _MEMORY) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def add(
        self,
        recipe_id: int,
        title: str | None,
        image: str | None,
        date_added: datetime,
    ) -> LikedRecipe:
        """Insert a liked recipe and return it with its local id."""
        conn = self._get_conn()
        cur = conn.execute(
            """INSERT INTO liked_recipes (recipe_id, title, image, date_added)
               VALUES (?, ?, ?, ?)""",
            (recipe_id, title, image, date_added.isoformat()),
        )
        conn.commit()
        return LikedRecipe(
            id=cur.lastrowid,
            recipe_id=recipe_id,
            title=title,
            image=image,
            date_added=date_added,
        )

    def remove(self, liked_id: int) -> None:
        conn = self._get_conn()
        conn.execute("DELETE FROM liked_recipes WHERE id = ?", (liked_id,))
        conn.commit()

    def list_all(self) -> list[LikedRecipe]:
        """Return liked recipes, most recently added first."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM liked_recipes ORDER BY date_added DESC, id DESC"
        ).fetchall()
        return [
            LikedRecipe(
                id=row["id"],
                recipe_id=row["recipe_id"],
                title=row["title"],
                image=row["image"],
                date_added=datetime.fromisoformat(row["date_added"]),
            )
            for row in rows
        ]
