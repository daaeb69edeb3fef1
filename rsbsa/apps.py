from django.apps import AppConfig


class RsbsaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rsbsa"
    verbose_name = "RSBSA Registry"
