from django.apps import AppConfig


class IntentionsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.intentions'
    label = 'intentions'
