import threading
import time
from typing import Set


_scheduled_apps: Set[int] = set()


def run_cleanup_once(app) -> int:
    """Expire rooms older than ROOM_MAX_AGE_MS; returns how many were removed."""
    store = app.extensions['room_store']
    max_age_ms = int(app.config.get('ROOM_MAX_AGE_MS', 24 * 60 * 60 * 1000))
    removed = store.cleanup_old_rooms(max_age_ms)
    try:
        app.logger.info(f"[cleanup] removed={removed} remaining={store.get_room_count()} max_age_ms={max_age_ms}")
    except Exception:
        pass
    return removed


def schedule_room_cleanup(app) -> None:
    """Start the periodic room expiry worker for this app.

    - No-ops in TESTING mode (unless ENABLE_CLEANUP_IN_TESTS is set)
    - No-ops when ROOM_CLEANUP_INTERVAL_SEC is 0
    - Ensures a single worker per app
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_CLEANUP_IN_TESTS'):
        return

    interval = int(app.config.get('ROOM_CLEANUP_INTERVAL_SEC', 3600))
    if interval <= 0:
        return

    key = id(app)
    if key in _scheduled_apps:
        try:
            app.logger.info("[cleanup-skip] worker already running")
        except Exception:
            pass
        return
    _scheduled_apps.add(key)

    def _worker():
        while True:
            time.sleep(interval)
            try:
                run_cleanup_once(app)
            except Exception:
                # Keep the worker alive; the next pass retries
                app.logger.exception("[cleanup-error] room cleanup pass failed")

    thread = threading.Thread(target=_worker, name='room-cleanup', daemon=True)
    thread.start()
    try:
        app.logger.info(f"[cleanup-set] interval={interval}s")
    except Exception:
        pass
