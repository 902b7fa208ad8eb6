import logging

from booty_hunt.db import Store
from booty_hunt.services import run_ledger, tide_ledger


async def prepare_week(store: Store) -> None:
    """Materialize the current week's regatta seed and tide omen ahead of traffic.

    Scheduled for Monday 00:00 UTC. Both paths are idempotent get-or-create, so
    a run that overlaps live requests is harmless; a missed run only means the
    first request of the week creates the rows instead.
    """
    regatta = await run_ledger.get_or_create_regatta(store)
    omen = await tide_ledger.get_tide_omen(store)
    logging.info(
        f"Week {regatta.week_key} ready: regatta seed {regatta.seed}, omen {omen.omen_id}"
    )
