# bootstrap/apps.py

from django.apps import AppConfig
from django.db.models.signals import post_migrate


class BootstrapConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "bootstrap"
    verbose_name = "Bootstrap Defaults"

    def ready(self):
        from bootstrap.signals import seed_defaults_after_migrate

        post_migrate.connect(
            seed_defaults_after_migrate,
            sender=self,
            dispatch_uid="bootstrap.seed_defaults_after_migrate",
        )
