"""Supabase Realtime change stream for owner-filtered tables."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from supabase import AsyncClient

from pantry_pal.domain.records import USER_ID_COLUMN
from pantry_pal.domain.sync import ChangeType, DocumentChange
from pantry_pal.services.hub import ChangeCallback, ChangeStream, Subscription

_logger = logging.getLogger(__name__)

_EVENT_TYPES = {
    "INSERT": ChangeType.ADDED,
    "UPDATE": ChangeType.MODIFIED,
    "DELETE": ChangeType.REMOVED,
}


@dataclass
class SupabaseSubscription(Subscription):
    """An attached realtime channel."""

    client: AsyncClient
    channel: object

    async def close(self) -> None:
        await self.client.remove_channel(self.channel)


@dataclass
class SupabaseChangeStream(ChangeStream):
    """Streams ``postgres_changes`` for one user's rows of a table."""

    client: AsyncClient
    schema: str = "public"

    async def subscribe(
        self, table: str, user_id: str, on_changes: ChangeCallback
    ) -> Subscription:
        """Attach a realtime channel, then deliver existing rows as one batch.

        The channel is joined before the initial read so no change made in
        between is lost; a row seen in both is an idempotent upsert.
        """

        def handle_payload(payload: Mapping[str, object]) -> None:
            change = parse_change_payload(payload)
            if change is None:
                _logger.warning(
                    "Ignoring unrecognised change payload", extra={"table": table}
                )
                return
            on_changes([change])

        def handle_status(status: object, error: Exception | None = None) -> None:
            if error is not None:
                _logger.error(
                    "Change stream error",
                    extra={"table": table, "status": str(status)},
                    exc_info=error,
                )
            else:
                _logger.debug("Change stream status %s for %s", status, table)

        channel = self.client.channel(f"{table}:{user_id}")
        channel.on_postgres_changes(
            "*",
            schema=self.schema,
            table=table,
            filter=f"{USER_ID_COLUMN}=eq.{user_id}",
            callback=handle_payload,
        )
        await channel.subscribe(handle_status)

        response = (
            await self.client.table(table)
            .select("*")
            .eq(USER_ID_COLUMN, user_id)
            .execute()
        )
        initial = [
            DocumentChange(ChangeType.ADDED, str(row["id"]), row)
            for row in response.data or []
            if row.get("id") is not None
        ]
        on_changes(initial)
        return SupabaseSubscription(client=self.client, channel=channel)


def parse_change_payload(payload: Mapping[str, object]) -> DocumentChange | None:
    """Translate a realtime payload into a change record.

    Accepts both the nested ``data.type/record/old_record`` shape and the flat
    ``eventType/new/old`` shape. Returns None when no id can be found.
    """
    data = payload.get("data")
    if isinstance(data, Mapping):
        event = data.get("type")
        new = data.get("record")
        old = data.get("old_record")
    else:
        event = payload.get("eventType")
        new = payload.get("new")
        old = payload.get("old")
    change_type = _EVENT_TYPES.get(str(event).upper())
    if change_type is None:
        return None
    row = old if change_type is ChangeType.REMOVED else new
    if not isinstance(row, Mapping) or row.get("id") is None:
        return None
    return DocumentChange(change_type, str(row["id"]), dict(row))
