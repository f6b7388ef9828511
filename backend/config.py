import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma-separated list of frontend origins allowed to call the API
    CORS_ORIGINS = [
        o.strip()
        for o in (os.environ.get('CORS_ORIGINS') or 'http://localhost:5173,https://pyy-space.github.io').split(',')
        if o.strip()
    ]
    # Rooms older than this are expired by the cleanup worker (ms)
    ROOM_MAX_AGE_MS = int(os.environ.get('ROOM_MAX_AGE_MS', str(24 * 60 * 60 * 1000)))
    # How often the cleanup worker runs (seconds). 0 disables.
    ROOM_CLEANUP_INTERVAL_SEC = int(os.environ.get('ROOM_CLEANUP_INTERVAL_SEC', '3600'))
    PORT = int(os.environ.get('PORT', '3000'))
