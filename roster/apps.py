from django.apps import AppConfig


class RosterConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "roster"

    def ready(self) -> None:
        from roster import signals  # noqa: F401
