"""SQLite implementation of wheel rotation storage."""

from datetime import date, datetime
from uuid import uuid4

import aiosqlite

from mro.config import get_logger
from mro.core.entities.stock import utcnow
from mro.core.entities.wheel_rotation import RotationHistory, WheelRotationAsset
from mro.core.exceptions import DatabaseError, WheelRotationNotFoundError
from mro.core.interfaces.wheel_rotation_store import IWheelRotationStore, RotationResult
from mro.core.services.rotation_schedule import calculate_next_rotation_date
from mro.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from mro.infrastructure.storage.sqlite.metrics import StoreMetrics

logger = get_logger(__name__)


class SQLiteWheelRotationStore(IWheelRotationStore):
    """SQLite implementation of wheel rotation assets and history."""

    def __init__(self, metrics: StoreMetrics | None = None):
        self.metrics = metrics or StoreMetrics()

    async def create(self, asset: WheelRotationAsset) -> WheelRotationAsset:
        """Create a new wheel rotation asset."""
        now = utcnow()
        asset.id = asset.id or uuid4().hex
        asset.created_at = now
        asset.updated_at = now
        with self.metrics.track(asset.company_id, "create_wheel_rotation", "write"):
            try:
                async with get_transaction() as conn:
                    await conn.execute(
                        """
                        INSERT INTO wheel_rotations (
                            id, company_id, arrival_date, station, airline,
                            wheel_part_number, wheel_serial_number, rotation_frequency,
                            current_position, last_rotation_date, next_rotation_due,
                            is_active, notes, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            asset.id,
                            asset.company_id,
                            asset.arrival_date.isoformat(),
                            asset.station,
                            asset.airline,
                            asset.wheel_part_number,
                            asset.wheel_serial_number,
                            asset.rotation_frequency,
                            asset.current_position,
                            asset.last_rotation_date.isoformat(),
                            asset.next_rotation_due.isoformat(),
                            int(asset.is_active),
                            asset.notes,
                            asset.created_at.isoformat(),
                            asset.updated_at.isoformat(),
                        ),
                    )
            except aiosqlite.Error as e:
                logger.error("wheel_rotation_create_failed", error=str(e))
                raise DatabaseError("create_wheel_rotation", str(e)) from e

        logger.info(
            "wheel_rotation_created",
            wheel_id=asset.id,
            serial=asset.wheel_serial_number,
            next_rotation_due=asset.next_rotation_due.isoformat(),
        )
        return asset

    async def get(
        self, company_id: str, wheel_id: str, include_history: bool = False
    ) -> WheelRotationAsset | None:
        """Get an asset by ID, optionally with its full history."""
        with self.metrics.track(company_id, "get_wheel_rotation", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    "SELECT * FROM wheel_rotations WHERE id = ? AND company_id = ?",
                    (wheel_id, company_id),
                )
                row = await cursor.fetchone()
                if row is None:
                    return None
                asset = self._row_to_asset(row)

                if include_history:
                    cursor = await conn.execute(
                        """
                        SELECT * FROM wheel_rotation_history
                        WHERE company_id = ? AND wheel_rotation_id = ?
                        ORDER BY rotation_date DESC, created_at DESC
                        """,
                        (company_id, wheel_id),
                    )
                    asset.rotation_history = [
                        self._row_to_history(h) for h in await cursor.fetchall()
                    ]
        return asset

    async def list_assets(
        self, company_id: str, is_active: bool | None = None
    ) -> list[WheelRotationAsset]:
        """List assets newest first, each with its latest history row."""
        query = "SELECT * FROM wheel_rotations WHERE company_id = ?"
        params: list = [company_id]
        if is_active is not None:
            query += " AND is_active = ?"
            params.append(int(is_active))
        query += " ORDER BY created_at DESC, id"

        with self.metrics.track(company_id, "list_wheel_rotations", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(query, params)
                assets = [self._row_to_asset(row) for row in await cursor.fetchall()]

                cursor = await conn.execute(
                    """
                    SELECT * FROM (
                        SELECT h.*, ROW_NUMBER() OVER (
                            PARTITION BY wheel_rotation_id
                            ORDER BY rotation_date DESC, created_at DESC
                        ) AS rn
                        FROM wheel_rotation_history h
                        WHERE company_id = ?
                    ) WHERE rn = 1
                    """,
                    (company_id,),
                )
                latest = {
                    row["wheel_rotation_id"]: self._row_to_history(row)
                    for row in await cursor.fetchall()
                }

        for asset in assets:
            if asset.id in latest:
                asset.rotation_history = [latest[asset.id]]
        return assets

    async def list_due_until(
        self, company_id: str, until: date
    ) -> list[WheelRotationAsset]:
        """List active assets due on or before `until`, earliest due first."""
        with self.metrics.track(company_id, "list_due_wheel_rotations", "read"):
            async with get_connection() as conn:
                cursor = await conn.execute(
                    """
                    SELECT * FROM wheel_rotations
                    WHERE company_id = ? AND is_active = 1 AND next_rotation_due <= ?
                    ORDER BY next_rotation_due ASC, id
                    """,
                    (company_id, until.isoformat()),
                )
                rows = await cursor.fetchall()
        return [self._row_to_asset(row) for row in rows]

    async def update_details(self, asset: WheelRotationAsset) -> WheelRotationAsset:
        """
        Persist descriptive fields, frequency and active flag.

        Position and rotation dates are owned by record_rotation. When the
        frequency changes, the due date is recomputed from the stored
        last_rotation_date inside the same transaction.
        """
        if asset.id is None:
            raise WheelRotationNotFoundError("")

        now = utcnow()
        with self.metrics.track(asset.company_id, "update_wheel_rotation", "write"):
            try:
                async with get_transaction(immediate=True) as conn:
                    cursor = await conn.execute(
                        "SELECT * FROM wheel_rotations WHERE id = ? AND company_id = ?",
                        (asset.id, asset.company_id),
                    )
                    row = await cursor.fetchone()
                    if row is None:
                        raise WheelRotationNotFoundError(asset.id)

                    stored = self._row_to_asset(row)
                    next_due = stored.next_rotation_due
                    if asset.rotation_frequency != stored.rotation_frequency:
                        next_due = calculate_next_rotation_date(
                            stored.last_rotation_date, asset.rotation_frequency
                        )

                    await conn.execute(
                        """
                        UPDATE wheel_rotations SET
                            station = ?, airline = ?,
                            wheel_part_number = ?, wheel_serial_number = ?,
                            rotation_frequency = ?, next_rotation_due = ?,
                            is_active = ?, notes = ?, updated_at = ?
                        WHERE id = ? AND company_id = ?
                        """,
                        (
                            asset.station,
                            asset.airline,
                            asset.wheel_part_number,
                            asset.wheel_serial_number,
                            asset.rotation_frequency,
                            next_due.isoformat(),
                            int(asset.is_active),
                            asset.notes,
                            now.isoformat(),
                            asset.id,
                            asset.company_id,
                        ),
                    )
            except aiosqlite.Error as e:
                logger.error("wheel_rotation_update_failed", wheel_id=asset.id, error=str(e))
                raise DatabaseError("update_wheel_rotation", str(e)) from e

        updated = stored.model_copy(
            update={
                "station": asset.station,
                "airline": asset.airline,
                "wheel_part_number": asset.wheel_part_number,
                "wheel_serial_number": asset.wheel_serial_number,
                "rotation_frequency": asset.rotation_frequency,
                "next_rotation_due": next_due,
                "is_active": asset.is_active,
                "notes": asset.notes,
                "updated_at": now,
            }
        )
        logger.info("wheel_rotation_updated", wheel_id=asset.id, is_active=asset.is_active)
        return updated

    async def record_rotation(
        self,
        company_id: str,
        wheel_id: str,
        new_position: int,
        rotation_date: date,
        performed_by: str | None = None,
        notes: str | None = None,
    ) -> RotationResult:
        """Append a history row and move the asset to its new position atomically."""
        now = utcnow()
        with self.metrics.track(company_id, "record_rotation", "write"):
            try:
                async with get_transaction(immediate=True) as conn:
                    cursor = await conn.execute(
                        "SELECT * FROM wheel_rotations WHERE id = ? AND company_id = ?",
                        (wheel_id, company_id),
                    )
                    row = await cursor.fetchone()
                    if row is None:
                        raise WheelRotationNotFoundError(wheel_id)

                    asset = self._row_to_asset(row)
                    history = RotationHistory(
                        id=uuid4().hex,
                        company_id=company_id,
                        wheel_rotation_id=wheel_id,
                        rotation_date=rotation_date,
                        previous_position=asset.current_position,
                        new_position=new_position,
                        performed_by=performed_by,
                        notes=notes,
                        created_at=now,
                    )
                    await self._insert_history(conn, history)

                    next_due = calculate_next_rotation_date(
                        rotation_date, asset.rotation_frequency
                    )
                    await conn.execute(
                        """
                        UPDATE wheel_rotations SET
                            current_position = ?, last_rotation_date = ?,
                            next_rotation_due = ?, updated_at = ?
                        WHERE id = ? AND company_id = ?
                        """,
                        (
                            new_position,
                            rotation_date.isoformat(),
                            next_due.isoformat(),
                            now.isoformat(),
                            wheel_id,
                            company_id,
                        ),
                    )
            except aiosqlite.Error as e:
                logger.error("rotation_record_failed", wheel_id=wheel_id, error=str(e))
                raise DatabaseError("record_rotation", str(e)) from e

        asset.current_position = new_position
        asset.last_rotation_date = rotation_date
        asset.next_rotation_due = next_due
        asset.updated_at = now
        logger.info(
            "rotation_recorded",
            wheel_id=wheel_id,
            previous_position=history.previous_position,
            new_position=new_position,
            next_rotation_due=next_due.isoformat(),
        )
        return RotationResult(asset=asset, history=history)

    async def _insert_history(
        self, conn: aiosqlite.Connection, history: RotationHistory
    ) -> None:
        await conn.execute(
            """
            INSERT INTO wheel_rotation_history (
                id, company_id, wheel_rotation_id, rotation_date,
                previous_position, new_position, performed_by, notes, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                history.id,
                history.company_id,
                history.wheel_rotation_id,
                history.rotation_date.isoformat(),
                history.previous_position,
                history.new_position,
                history.performed_by,
                history.notes,
                history.created_at.isoformat(),
            ),
        )

    @staticmethod
    def _row_to_asset(row: aiosqlite.Row) -> WheelRotationAsset:
        """Convert a database row to a WheelRotationAsset entity."""
        return WheelRotationAsset(
            id=row["id"],
            company_id=row["company_id"],
            arrival_date=date.fromisoformat(row["arrival_date"]),
            station=row["station"],
            airline=row["airline"],
            wheel_part_number=row["wheel_part_number"],
            wheel_serial_number=row["wheel_serial_number"],
            rotation_frequency=row["rotation_frequency"],
            current_position=row["current_position"],
            last_rotation_date=date.fromisoformat(row["last_rotation_date"]),
            next_rotation_due=date.fromisoformat(row["next_rotation_due"]),
            is_active=bool(row["is_active"]),
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_history(row: aiosqlite.Row) -> RotationHistory:
        """Convert a database row to a RotationHistory entity."""
        return RotationHistory(
            id=row["id"],
            company_id=row["company_id"],
            wheel_rotation_id=row["wheel_rotation_id"],
            rotation_date=date.fromisoformat(row["rotation_date"]),
            previous_position=row["previous_position"],
            new_position=row["new_position"],
            performed_by=row["performed_by"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
