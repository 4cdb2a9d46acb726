from datetime import datetime, timezone

from reflectnote.core import config
from reflectnote.models.user import User
from reflectnote.repositories.base import CollectionRepository


class SessionTracker(CollectionRepository):
    """Current session user and its last-activity time.

    Both values are written and cleared together. Last activity is stored as
    milliseconds since the epoch.
    """

    def set_current_user(self, user: User | None) -> None:
        if user is None:
            self.store.set_many({config.CURRENT_USER_KEY: None, config.LAST_ACTIVITY_KEY: None})
            return

        millis = int(self.clock().timestamp() * 1000)
        self.store.set_many({
            config.CURRENT_USER_KEY: user.model_dump_json(by_alias=True),
            config.LAST_ACTIVITY_KEY: str(millis),
        })

    def get_current_user(self) -> User | None:
        raw = self.store.get(config.CURRENT_USER_KEY)
        if raw is None or raw == 'null':
            return None
        return User.model_validate_json(raw)

    def get_last_activity(self) -> datetime | None:
        raw = self.store.get(config.LAST_ACTIVITY_KEY)
        if raw is None:
            return None
        return datetime.fromtimestamp(int(raw) / 1000, tz=timezone.utc)
