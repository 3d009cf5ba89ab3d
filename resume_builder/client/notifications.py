import logging
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

DEFAULT_VARIANT = "default"
DESTRUCTIVE_VARIANT = "destructive"


@dataclass(frozen=True)
class Notification:
    """A user-facing toast message.

    Attributes:
        title (str): Short heading.
        description (str): Body text.
        variant (str): "default" or "destructive".

    """

    title: str
    description: str
    variant: str = DEFAULT_VARIANT


@dataclass
class Notifier:
    """Collects notifications in the order they were raised."""

    notifications: list[Notification] = field(default_factory=list)

    def notify(
        self, title: str, description: str, variant: str = DEFAULT_VARIANT
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.notifications.append(notification)
        _msg = f"[{variant}] {title}: {description}"
        if variant == DESTRUCTIVE_VARIANT:
            log.warning(_msg)
        else:
            log.info(_msg)
        return notification

    def success(self, description: str) -> Notification:
        return self.notify("Success", description)

    def error(self, description: str) -> Notification:
        return self.notify("Error", description, variant=DESTRUCTIVE_VARIANT)

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None
