from django.apps import AppConfig


class AccountsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'savage_nation.accounts'

    def ready(self):
        import savage_nation.accounts.signals  # noqa: F401
