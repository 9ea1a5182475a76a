import os

from config.structlog_config import configure_logging

# 1) Logging antes de qualquer import do Django
configure_logging()

# 2) Ajuste padrão de settings
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# 3) Cria a aplicação WSGI (o DI é montado no AppConfig.ready)
from django.core.wsgi import get_wsgi_application  # noqa: E402

application = get_wsgi_application()
