from django.apps import AppConfig


class PanicConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'panic'
    verbose_name = 'Panic alerts'
