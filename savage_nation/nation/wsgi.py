import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "savage_nation.nation.settings")

application = get_wsgi_application()
